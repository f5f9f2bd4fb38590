"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, so the schema can change
without touching the ledger services.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        parent_id=orm_account.parent_id,
        balance=_to_decimal(orm_account.balance),
        status=domain.AccountStatus(orm_account.status),
        is_imported=bool(orm_account.is_imported),
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        type=domain.TransactionType(orm_transaction.type),
        description=orm_transaction.description or "",
        debit_account_id=orm_transaction.debit_account_id,
        credit_account_id=orm_transaction.credit_account_id,
        amount=_to_decimal(orm_transaction.amount),
        status=domain.TransactionStatus(orm_transaction.status),
        reference=orm_transaction.reference,
        notes=orm_transaction.notes,
        created_by=orm_transaction.created_by,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )
