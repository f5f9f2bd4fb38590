"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data or a business rule."""


class ConsistencyError(DomainError):
    """A multi-record write failed and was rolled back.

    Nothing was persisted; the caller may retry the operation.
    """

    retryable = True


# Validation
class SameAccountError(ValidationError):
    """Debit and credit legs reference the same account."""


class NonPositiveAmountError(ValidationError):
    """Posting amount is zero or negative."""


class MissingColumnsError(ValidationError):
    """Import rows lack one or more required columns."""


class InvalidStatusTransitionError(ValidationError):
    """Transaction status change is not allowed."""


# Conflicts
class DuplicateCodeError(ConflictError):
    """Account code already in use."""


# Integrity guards
class CyclicParentError(DependencyError):
    """Parent assignment would make an account its own ancestor."""


class InvalidParentTypeError(DependencyError):
    """Parent account has a different account type."""


class ImportedAccountError(DependencyError):
    """Imported accounts are permanent."""


class AccountHasTransactionsError(DependencyError):
    """Account is referenced by at least one transaction."""


class AccountInactiveError(DependencyError):
    """Account is inactive and cannot receive postings."""


class AccountTypeLockedError(DependencyError):
    """Account type cannot change once postings exist."""


# Not found
class AccountNotFoundError(NotFoundError):
    """Referenced account does not exist."""


class TransactionNotFoundError(NotFoundError):
    """Referenced transaction does not exist."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account '{code}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code '{code}' already exists"


def cyclic_parent(account_code: str, parent_code: str) -> str:
    """Return message for a parent assignment that creates a cycle."""
    return (
        f"Cannot set parent of '{account_code}' to '{parent_code}': "
        f"'{account_code}' would become its own ancestor"
    )


def invalid_parent_type(account_type: str, parent_code: str, parent_type: str) -> str:
    """Return message for a parent of a different account type."""
    return (
        f"Parent account '{parent_code}' is of type {parent_type}, "
        f"expected {account_type}"
    )


def account_delete_blocked(code: str, transaction_count: int) -> str:
    """Return message when account has dependent transactions."""
    return (
        f"Cannot delete account '{code}': it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}"
    )


def imported_account_delete(code: str) -> str:
    """Return message when deleting an imported account."""
    return f"Cannot delete account '{code}': imported accounts are permanent"


def account_inactive(code: str) -> str:
    """Return message for postings against an inactive account."""
    return f"Account '{code}' is inactive"


def missing_columns(columns: list[str]) -> str:
    """Return message for import data without required columns."""
    return (
        f"Missing required columns: {', '.join(columns)}. "
        "Required columns are: code, name, type"
    )
