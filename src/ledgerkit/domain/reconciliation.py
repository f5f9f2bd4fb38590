"""Trial balance and accounting-equation checks."""

from decimal import Decimal
from typing import Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    EquationCheck,
    NormalSide,
    TrialBalanceRow,
)
from ledgerkit.domain.projection import net_income, type_aggregate
from ledgerkit.logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")


def trial_balance(accounts: Sequence[Account]) -> list[TrialBalanceRow]:
    """One row per account with its balance in the debit or credit column.

    A non-negative balance goes on the account's normal side; a negative
    balance goes, as a positive figure, on the opposite side.
    """
    zero = Decimal("0.00")
    rows = []
    for acc in sorted(accounts, key=lambda a: a.code):
        side = acc.normal_side if acc.balance >= 0 else acc.normal_side.opposite
        amount = abs(acc.balance)
        rows.append(
            TrialBalanceRow(
                code=acc.code,
                name=acc.name,
                type=acc.type,
                debit=amount if side is NormalSide.DEBIT else zero,
                credit=amount if side is NormalSide.CREDIT else zero,
            )
        )
    return rows


def totals(rows: Sequence[TrialBalanceRow]) -> tuple[Decimal, Decimal]:
    """Return ``(total_debits, total_credits)``."""
    return (
        sum((row.debit for row in rows), Decimal("0")),
        sum((row.credit for row in rows), Decimal("0")),
    )


def is_balanced(rows: Sequence[TrialBalanceRow], tolerance: Decimal = DEFAULT_TOLERANCE) -> bool:
    """True when total debits and credits differ by less than ``tolerance``."""
    total_debits, total_credits = totals(rows)
    return abs(total_debits - total_credits) < tolerance


class ReconciliationChecker:
    """Service producing trial balances and equation checks.

    Results are advisory: postings keep debits equal to credits by
    construction, so an imbalance points at balances changed outside the
    poster rather than at a user mistake.
    """

    def __init__(self, db: Database):
        """Initialize reconciliation checker.

        Args:
            db: Database instance
        """
        self.db = db

    def trial_balance(self, accounts: Optional[Sequence[Account]] = None) -> list[TrialBalanceRow]:
        """Trial balance over the given accounts (all stored accounts if None)."""
        if accounts is None:
            accounts = self.db.list_accounts()
        return trial_balance(accounts)

    def is_balanced(
        self, rows: Sequence[TrialBalanceRow], tolerance: Decimal = DEFAULT_TOLERANCE
    ) -> bool:
        balanced = is_balanced(rows, tolerance)
        if not balanced:
            total_debits, total_credits = totals(rows)
            logger.warning(
                "Trial balance out of balance: debits %s, credits %s", total_debits, total_credits
            )
        return balanced

    def verify_equation(
        self,
        accounts: Optional[Sequence[Account]] = None,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ) -> EquationCheck:
        """Check Assets = Liabilities + Equity + (Revenue - Expenses)."""
        if accounts is None:
            accounts = self.db.list_accounts()
        assets = type_aggregate(accounts, AccountType.ASSET)
        liabilities = type_aggregate(accounts, AccountType.LIABILITY)
        equity = type_aggregate(accounts, AccountType.EQUITY)
        income = net_income(accounts)
        difference = assets - liabilities - equity - income
        balanced = abs(difference) < tolerance
        if not balanced:
            logger.warning("Accounting equation off by %s", difference)
        return EquationCheck(
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            net_income=income,
            difference=difference,
            balanced=balanced,
        )
