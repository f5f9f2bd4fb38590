"""Read-only balance views: account ledgers and type aggregates."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    LedgerLine,
    StatementSection,
    TransactionStatus,
)
from ledgerkit.domain.errors import AccountNotFoundError, account_not_found
from ledgerkit.domain.polarity import signed_effect

BALANCE_STATUSES = (TransactionStatus.POSTED, TransactionStatus.RECONCILED)


def type_aggregate(
    accounts: Sequence[Account], account_type: AccountType, leaves_only: bool = False
) -> Decimal:
    """Sum the balances of every account of a type.

    The default is a flat sum: a parent and its children are each counted
    with their own stored balance, with no rollup. If parent accounts carry
    balances of their own this counts money twice; ``leaves_only`` restricts
    the sum to accounts without children.
    """
    parent_ids = {acc.parent_id for acc in accounts if acc.parent_id is not None}
    total = Decimal("0")
    for acc in accounts:
        if acc.type is not account_type:
            continue
        if leaves_only and acc.id in parent_ids:
            continue
        total += acc.balance
    return total


def net_income(accounts: Sequence[Account], leaves_only: bool = False) -> Decimal:
    """Revenue minus expenses."""
    return type_aggregate(accounts, AccountType.REVENUE, leaves_only) - type_aggregate(
        accounts, AccountType.EXPENSE, leaves_only
    )


def balance_check(accounts: Sequence[Account], leaves_only: bool = False) -> Decimal:
    """Assets minus liabilities minus equity."""
    return (
        type_aggregate(accounts, AccountType.ASSET, leaves_only)
        - type_aggregate(accounts, AccountType.LIABILITY, leaves_only)
        - type_aggregate(accounts, AccountType.EQUITY, leaves_only)
    )


class BalanceProjector:
    """Service building ledger views and statement totals. Never writes."""

    def __init__(self, db: Database):
        """Initialize balance projector.

        Args:
            db: Database instance
        """
        self.db = db

    def account_ledger(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> list[LedgerLine]:
        """Build the ledger of one account with a running balance column.

        Posted and reconciled transactions touching the account on either
        leg are listed oldest first. The running balance is seeded with the
        account's current stored balance and accumulates each row's effect
        forward, so it is not the balance the account had on that date.

        Args:
            account_id: Account ID
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            search: Optional text matched against description and reference

        Raises:
            AccountNotFoundError: If the account doesn't exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))

        transactions = self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            statuses=BALANCE_STATUSES,
            search=search,
        )

        lines = []
        running = account.balance
        zero = Decimal("0.00")
        for txn in transactions:
            debit = txn.amount if txn.debit_account_id == account_id else zero
            credit = txn.amount if txn.credit_account_id == account_id else zero
            running += signed_effect(account.type, debit, credit)
            lines.append(
                LedgerLine(
                    transaction_id=txn.id,
                    date=txn.date,
                    description=txn.description,
                    reference=txn.reference,
                    debit=debit,
                    credit=credit,
                    running_balance=running,
                )
            )
        return lines

    def type_aggregate(
        self,
        account_type: AccountType,
        accounts: Optional[Sequence[Account]] = None,
        leaves_only: bool = False,
    ) -> Decimal:
        """Flat sum of balances for a type (all stored accounts if None given)."""
        return type_aggregate(self._accounts(accounts), account_type, leaves_only)

    def net_income(self, accounts: Optional[Sequence[Account]] = None) -> Decimal:
        return net_income(self._accounts(accounts))

    def balance_check(self, accounts: Optional[Sequence[Account]] = None) -> Decimal:
        return balance_check(self._accounts(accounts))

    def balance_sheet(self, accounts: Optional[Sequence[Account]] = None) -> list[StatementSection]:
        """Asset, liability and equity sections with flat-sum totals."""
        return self._sections(
            self._accounts(accounts),
            (AccountType.ASSET, AccountType.LIABILITY, AccountType.EQUITY),
        )

    def income_statement(
        self, accounts: Optional[Sequence[Account]] = None
    ) -> list[StatementSection]:
        """Revenue and expense sections with flat-sum totals."""
        return self._sections(self._accounts(accounts), (AccountType.REVENUE, AccountType.EXPENSE))

    def _accounts(self, accounts: Optional[Sequence[Account]]) -> Sequence[Account]:
        if accounts is None:
            return self.db.list_accounts()
        return accounts

    @staticmethod
    def _sections(
        accounts: Sequence[Account], account_types: Sequence[AccountType]
    ) -> list[StatementSection]:
        return [
            StatementSection(
                type=account_type,
                accounts=tuple(acc for acc in accounts if acc.type is account_type),
                total=type_aggregate(accounts, account_type),
            )
            for account_type in account_types
        ]
