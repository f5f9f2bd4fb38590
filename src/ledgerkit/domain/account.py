"""Chart-of-accounts domain service."""

import re
from collections import defaultdict
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account,
    AccountNode,
    AccountStatus,
    AccountType,
    ImportResult,
)
from ledgerkit.domain.errors import (
    AccountHasTransactionsError,
    AccountNotFoundError,
    AccountTypeLockedError,
    CyclicParentError,
    DuplicateCodeError,
    ImportedAccountError,
    InvalidParentTypeError,
    MissingColumnsError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    cyclic_parent,
    duplicate_account_code,
    imported_account_delete,
    invalid_parent_type,
    missing_columns,
)
from ledgerkit.logging_setup import get_logger
from ledgerkit.utils.amount_parser import parse_amount, to_cents

logger = get_logger(__name__)

CODE_PATTERN = re.compile(r"^[A-Za-z0-9-]{1,20}$")
REQUIRED_IMPORT_COLUMNS = ("code", "name", "type")
MAX_HIERARCHY_DEPTH = 64


def validate_code(code: str) -> str:
    """Return the stripped account code or raise ValidationError."""
    code = (code or "").strip()
    if not code:
        raise ValidationError("Account code is required")
    if not CODE_PATTERN.match(code):
        raise ValidationError(
            f"Invalid account code '{code}': use up to 20 letters, numbers and dashes"
        )
    return code


def validate_name(name: str) -> str:
    """Return the stripped account name or raise ValidationError."""
    name = (name or "").strip()
    if len(name) < 2:
        raise ValidationError("Account name must be at least 2 characters")
    if len(name) > 200:
        raise ValidationError("Account name must not exceed 200 characters")
    return name


def validate_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    if len(description) > 1000:
        raise ValidationError("Description must not exceed 1000 characters")
    return description or None


def build_hierarchy(accounts: Sequence[Account]) -> list[AccountNode]:
    """Arrange accounts into a tree sorted by code at every level.

    Accounts whose parent is missing from ``accounts`` become roots. The
    walk never visits an account twice, so a parent cycle that slipped into
    the store still terminates; its members are promoted to roots.

    Args:
        accounts: Accounts to arrange

    Returns:
        Root nodes, each annotated with its depth (``level``)
    """
    by_id = {acc.id: acc for acc in accounts}
    children: dict[int, list[Account]] = defaultdict(list)
    roots: list[Account] = []
    for acc in accounts:
        if acc.parent_id is None or acc.parent_id not in by_id or acc.parent_id == acc.id:
            roots.append(acc)
        else:
            children[acc.parent_id].append(acc)

    visited: set[int] = set()

    def build(acc: Account, level: int) -> AccountNode:
        visited.add(acc.id)
        if level >= MAX_HIERARCHY_DEPTH:
            logger.warning("Hierarchy below account '%s' exceeds %d levels", acc.code, level)
            return AccountNode(account=acc, level=level)
        nodes = []
        for child in sorted(children[acc.id], key=lambda a: a.code):
            if child.id not in visited:
                nodes.append(build(child, level + 1))
        return AccountNode(account=acc, level=level, children=tuple(nodes))

    tree = [build(acc, 0) for acc in sorted(roots, key=lambda a: a.code)]

    stranded = sorted((acc for acc in accounts if acc.id not in visited), key=lambda a: a.code)
    for acc in stranded:
        if acc.id in visited:
            continue
        logger.warning("Account '%s' is part of a parent cycle; shown as a root", acc.code)
        tree.append(build(acc, 0))

    tree.sort(key=lambda node: node.account.code)
    return tree


class AccountRegistry:
    """Service owning the chart-of-accounts hierarchy."""

    def __init__(self, db: Database):
        """Initialize account registry.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType | str,
        parent_id: Optional[int] = None,
        initial_balance: Decimal | int | str = Decimal("0"),
        description: Optional[str] = None,
        status: AccountStatus = AccountStatus.ACTIVE,
    ) -> Account:
        """Create a new account.

        Args:
            code: Unique account code (e.g. "1110")
            name: Account name
            account_type: Account type or alias (e.g. "asset")
            parent_id: Optional parent account ID
            initial_balance: Opening balance
            description: Optional description
            status: Initial status

        Returns:
            The created account

        Raises:
            ValidationError: If code, name, type or description is invalid
            DuplicateCodeError: If the code is already used (case-insensitive)
            AccountNotFoundError: If the parent doesn't exist
            InvalidParentTypeError: If the parent has a different type
        """
        code = validate_code(code)
        name = validate_name(name)
        description = validate_description(description)
        account_type = self._parse_type(account_type)
        try:
            balance = to_cents(initial_balance)
        except ValueError as e:
            raise ValidationError(str(e))

        if self.db.get_account_by_code(code) is not None:
            raise DuplicateCodeError(duplicate_account_code(code))

        if parent_id is not None:
            parent = self.require_account(parent_id)
            self._check_parent_type(account_type, parent)

        account_id = self.db.create_account(
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            balance=balance,
            description=description,
            status=status,
        )
        logger.info("Created account %s '%s' (%s)", code, name, account_type.value)
        return self.require_account(account_id)

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> Account:
        """Get account by ID or raise AccountNotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def get_account_by_code(self, code: str) -> Optional[Account]:
        return self.db.get_account_by_code(code)

    def list_accounts(
        self,
        account_type: Optional[AccountType | str] = None,
        status: Optional[AccountStatus] = None,
        search: Optional[str] = None,
    ) -> list[Account]:
        """List accounts ordered by code.

        Args:
            account_type: Optional type filter
            status: Optional status filter
            search: Optional text matched against code, name and description
        """
        if account_type is not None:
            account_type = self._parse_type(account_type)
        return self.db.list_accounts(account_type=account_type, status=status, search=search)

    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: Optional[AccountType | str] = None,
        parent_id: Optional[int] = None,
        description: Optional[str] = None,
        status: Optional[AccountStatus] = None,
        clear_parent: bool = False,
        clear_description: bool = False,
    ) -> Account:
        """Update account fields.

        Only the fields that are provided change. Balances are never
        changed here; they move only through postings.

        Args:
            account_id: Account ID to update
            code: Optional new code
            name: Optional new name
            account_type: Optional new type (rejected once postings exist)
            parent_id: Optional new parent ID
            description: Optional new description
            status: Optional new status
            clear_parent: If True, make the account a root (parent_id must be None)
            clear_description: If True, remove the description (description must be None)

        Raises:
            AccountNotFoundError: If the account or new parent doesn't exist
            DuplicateCodeError: If the new code belongs to another account
            CyclicParentError: If the new parent is the account or a descendant
            InvalidParentTypeError: If parent and child types would differ
            AccountTypeLockedError: If the type changes after postings exist
        """
        account = self.require_account(account_id)

        if clear_parent and parent_id is not None:
            raise ValidationError("Cannot set both parent_id and clear_parent")
        if clear_description and description is not None:
            raise ValidationError("Cannot set both description and clear_description")

        if code is not None:
            code = validate_code(code)
            existing = self.db.get_account_by_code(code)
            if existing is not None and existing.id != account_id:
                raise DuplicateCodeError(duplicate_account_code(code))
        if name is not None:
            name = validate_name(name)
        description = validate_description(description)

        new_type = account.type
        if account_type is not None:
            new_type = self._parse_type(account_type)
            if new_type is not account.type:
                postings = self.db.get_account_transaction_count(account_id)
                if postings > 0:
                    logger.warning(
                        "Rejected type change of account '%s' with %d transactions",
                        account.code,
                        postings,
                    )
                    raise AccountTypeLockedError(
                        f"Cannot change type of account '{account.code}': "
                        f"it has {postings} transaction{'s' if postings != 1 else ''}"
                    )
                for child in self.db.list_accounts():
                    if child.parent_id == account_id and child.type is not new_type:
                        raise InvalidParentTypeError(
                            f"Cannot change type of account '{account.code}': "
                            f"child account '{child.code}' is of type {child.type.value}"
                        )

        new_parent_id = account.parent_id
        if clear_parent:
            new_parent_id = None
        elif parent_id is not None:
            new_parent_id = parent_id
            parent = self.require_account(parent_id)
            self._check_no_cycle(account, parent)

        if new_parent_id is not None and (parent_id is not None or new_type is not account.type):
            self._check_parent_type(new_type, self.require_account(new_parent_id))

        self.db.update_account(
            account_id=account_id,
            code=code,
            name=name,
            account_type=new_type if account_type is not None else None,
            parent_id=new_parent_id if (clear_parent or parent_id is not None) else None,
            description=description,
            status=status,
            update_parent=clear_parent,
            update_description=clear_description,
        )
        logger.info("Updated account '%s'", code or account.code)
        return self.require_account(account_id)

    def set_status(self, account_ids: Iterable[int], status: AccountStatus) -> list[Account]:
        """Activate or deactivate several accounts in one commit.

        Raises:
            AccountNotFoundError: If any account doesn't exist (nothing changes)
        """
        account_ids = list(account_ids)
        with self.db.atomic():
            for account_id in account_ids:
                self.require_account(account_id)
                self.db.update_account(account_id=account_id, status=status)
        logger.info("Set %d account(s) to %s", len(account_ids), status.value)
        return [self.require_account(account_id) for account_id in account_ids]

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Child accounts are moved to the root level; parent-child links are
        not ledger references and never block deletion.

        Raises:
            AccountNotFoundError: If the account doesn't exist
            ImportedAccountError: If the account was created by bulk import
            AccountHasTransactionsError: If any transaction references it
        """
        account = self.require_account(account_id)

        if account.is_imported:
            raise ImportedAccountError(imported_account_delete(account.code))

        transaction_count = self.db.get_account_transaction_count(account_id)
        if transaction_count > 0:
            raise AccountHasTransactionsError(
                account_delete_blocked(account.code, transaction_count)
            )

        self.db.delete_account(account_id)
        logger.info("Deleted account '%s'", account.code)

    def bulk_import(self, rows: Sequence[Mapping[str, Any]]) -> ImportResult:
        """Import accounts from parsed CSV rows.

        Column names are matched case-insensitively. Required columns are
        ``code``, ``name`` and ``type``; ``parentcode`` (or ``parent_code``),
        ``description`` and ``balance`` are optional. Rows whose code already
        exists, or appeared earlier in the batch, are skipped. Parent codes
        resolve against existing accounts and earlier rows of the batch;
        unknown parents yield a root account. A resolved parent is linked even
        when its type differs, which is logged. Everything is written in one
        commit and every created account is marked as imported.

        Args:
            rows: Parsed rows, e.g. from ``csv.DictReader``

        Returns:
            ImportResult with the number imported and the skipped codes

        Raises:
            MissingColumnsError: If a required column is absent
        """
        normalized = [
            {str(key).strip().lower(): value for key, value in row.items() if key is not None}
            for row in rows
        ]
        columns: set[str] = set()
        for row in normalized:
            columns.update(row)
        missing = [col for col in REQUIRED_IMPORT_COLUMNS if col not in columns]
        if normalized and missing:
            raise MissingColumnsError(missing_columns(missing))

        known: dict[str, tuple[int, AccountType]] = {
            acc.code.lower(): (acc.id, acc.type) for acc in self.db.list_accounts()
        }
        skipped: list[str] = []
        created: list[int] = []

        with self.db.atomic():
            for row_num, row in enumerate(normalized, start=1):
                code = _cell(row, "code")
                name = _cell(row, "name")
                type_text = _cell(row, "type")
                if not code or not name or not type_text:
                    logger.warning("Import row %d skipped: missing code, name or type", row_num)
                    if code:
                        skipped.append(code)
                    continue

                if code.lower() in known:
                    skipped.append(code)
                    continue

                try:
                    code = validate_code(code)
                    name = validate_name(name)
                    description = validate_description(_cell(row, "description"))
                except ValidationError as e:
                    logger.warning("Import row %d skipped: %s", row_num, e)
                    skipped.append(code)
                    continue

                try:
                    account_type = AccountType.parse(type_text)
                except ValueError:
                    logger.warning(
                        "Import row %d: unknown type '%s', using %s",
                        row_num,
                        type_text,
                        AccountType.ASSET.value,
                    )
                    account_type = AccountType.ASSET

                balance = Decimal("0")
                balance_text = _cell(row, "balance")
                if balance_text:
                    try:
                        balance = parse_amount(balance_text)
                    except ValueError:
                        logger.warning("Import row %d: invalid balance '%s', using 0", row_num, balance_text)

                parent_id = None
                parent_code = _cell(row, "parentcode") or _cell(row, "parent_code")
                if parent_code:
                    parent = known.get(parent_code.lower())
                    if parent is None:
                        logger.info("Import row %d: parent '%s' not found, importing as root", row_num, parent_code)
                    else:
                        parent_id, parent_type = parent
                        if parent_type is not account_type:
                            logger.warning(
                                "Import row %d: '%s' (%s) linked under parent '%s' of type %s",
                                row_num,
                                code,
                                account_type.value,
                                parent_code,
                                parent_type.value,
                            )

                account_id = self.db.create_account(
                    code=code,
                    name=name,
                    account_type=account_type,
                    parent_id=parent_id,
                    balance=balance,
                    description=description,
                    is_imported=True,
                )
                known[code.lower()] = (account_id, account_type)
                created.append(account_id)

        logger.info("Imported %d account(s), skipped %d", len(created), len(skipped))
        return ImportResult(imported=len(created), skipped=skipped, account_ids=created)

    def build_hierarchy(self, accounts: Optional[Sequence[Account]] = None) -> list[AccountNode]:
        """Get the chart of accounts as a tree.

        Args:
            accounts: Accounts to arrange (all accounts if None)
        """
        if accounts is None:
            accounts = self.db.list_accounts()
        return build_hierarchy(accounts)

    def _parse_type(self, account_type: AccountType | str) -> AccountType:
        try:
            return AccountType.parse(account_type)
        except ValueError as e:
            raise ValidationError(str(e))

    def _check_parent_type(self, account_type: AccountType, parent: Account) -> None:
        if parent.type is not account_type:
            raise InvalidParentTypeError(
                invalid_parent_type(account_type.value, parent.code, parent.type.value)
            )

    def _check_no_cycle(self, account: Account, parent: Account) -> None:
        """Walk up from the proposed parent; the account must not appear."""
        seen: set[int] = set()
        current: Optional[Account] = parent
        while current is not None:
            if current.id == account.id or current.id in seen:
                raise CyclicParentError(cyclic_parent(account.code, parent.code))
            seen.add(current.id)
            if current.parent_id is None:
                break
            current = self.db.get_account(current.parent_id)


def _cell(row: Mapping[str, Any], column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    text = str(value).strip()
    return text or None
