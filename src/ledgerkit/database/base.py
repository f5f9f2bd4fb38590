"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Iterable
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    Account,
    AccountStatus,
    AccountType,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from ledgerkit.notifications import ChangeNotifier


class Database(ABC):
    """Abstract database interface for the ledger store.

    Every write method commits on its own unless called inside
    :meth:`atomic`, in which case all writes in the block are committed
    together or not at all. Change notifications are published only after
    the commit succeeds.
    """

    notifier: ChangeNotifier

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into a single all-or-nothing commit.

        Raises:
            ConsistencyError: If the store rejects the commit; the block is
                rolled back
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent_id: Optional[int] = None,
        balance: Decimal = Decimal("0"),
        description: Optional[str] = None,
        status: AccountStatus = AccountStatus.ACTIVE,
        is_imported: bool = False,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code (case-insensitive)."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        status: Optional[AccountStatus] = None,
        search: Optional[str] = None,
    ) -> list[Account]:
        """List accounts ordered by code, with optional filters."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        parent_id: Optional[int] = None,
        description: Optional[str] = None,
        status: Optional[AccountStatus] = None,
        update_parent: bool = False,
        update_description: bool = False,
    ) -> None:
        """Update account fields.

        Args:
            update_parent: If True, set parent_id even when it is None
            update_description: If True, set description even when it is None
        """
        pass

    @abstractmethod
    def apply_balance_delta(self, account_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to an account's stored balance."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account, moving its children to the root level."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Count transactions referencing an account on either leg."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        txn_date: date,
        txn_type: TransactionType,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal,
        status: TransactionStatus,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> int:
        """Create a transaction record. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction_status(self, transaction_id: int, status: TransactionStatus) -> None:
        """Update transaction status."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        statuses: Optional[Iterable[TransactionStatus]] = None,
        txn_type: Optional[TransactionType] = None,
        search: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions ordered by date then insertion order.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_id: Only transactions with this account on either leg
            statuses: Only transactions in one of these statuses
            txn_type: Only transactions of this type
            search: Case-insensitive text match on description or reference
        """
        pass
