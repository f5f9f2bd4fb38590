"""Domain model entities for ledgerkit.

These are pure data classes representing ledger concepts, independent of
database schema. Services receive and return these; the ORM models never
leave the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class NormalSide(str, Enum):
    """Side on which an account type's balance increases."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "NormalSide":
        return NormalSide.CREDIT if self is NormalSide.DEBIT else NormalSide.DEBIT


class AccountType(str, Enum):
    """Chart-of-accounts type."""

    ASSET = "Assets"
    LIABILITY = "Liabilities"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expenses"

    @property
    def normal_side(self) -> NormalSide:
        return _NORMAL_SIDES[self]

    @classmethod
    def parse(cls, value: "str | AccountType") -> "AccountType":
        """Parse an account type from its value, name or a common alias.

        Raises:
            ValueError: If the text names no account type
        """
        if isinstance(value, AccountType):
            return value
        key = value.strip().lower()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]
        raise ValueError(
            f"Unknown account type '{value}'. "
            "Expected one of: asset, liability, equity, revenue, expense"
        )


_NORMAL_SIDES: dict[AccountType, NormalSide] = {
    AccountType.ASSET: NormalSide.DEBIT,
    AccountType.EXPENSE: NormalSide.DEBIT,
    AccountType.LIABILITY: NormalSide.CREDIT,
    AccountType.EQUITY: NormalSide.CREDIT,
    AccountType.REVENUE: NormalSide.CREDIT,
}

_TYPE_ALIASES: dict[str, AccountType] = {
    "asset": AccountType.ASSET,
    "assets": AccountType.ASSET,
    "liability": AccountType.LIABILITY,
    "liabilities": AccountType.LIABILITY,
    "equity": AccountType.EQUITY,
    "revenue": AccountType.REVENUE,
    "revenues": AccountType.REVENUE,
    "expense": AccountType.EXPENSE,
    "expenses": AccountType.EXPENSE,
}


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransactionType(str, Enum):
    """Informational transaction kind; does not affect posting math."""

    SALE = "sale"
    PURCHASE = "purchase"
    PAYMENT = "payment"
    RECEIPT = "receipt"
    EXPENSE = "expense"
    REFUND = "refund"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    POSTED = "posted"
    RECONCILED = "reconciled"
    VOID = "void"

    @property
    def affects_balances(self) -> bool:
        """Whether transactions in this status count toward balances."""
        return self in (TransactionStatus.POSTED, TransactionStatus.RECONCILED)


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    code: str
    name: str
    type: AccountType
    parent_id: Optional[int]
    balance: Decimal
    status: AccountStatus
    is_imported: bool
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def normal_side(self) -> NormalSide:
        return self.type.normal_side

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.ACTIVE


@dataclass(frozen=True)
class Transaction:
    """Two-leg journal entry."""

    id: int
    date: date
    type: TransactionType
    description: str
    debit_account_id: int
    credit_account_id: int
    amount: Decimal
    status: TransactionStatus
    reference: Optional[str]
    notes: Optional[str]
    created_by: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LedgerLine:
    """One row of an account ledger view. Never persisted."""

    transaction_id: int
    date: date
    description: str
    reference: Optional[str]
    debit: Decimal
    credit: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class AccountNode:
    """Account with its children in the chart-of-accounts tree."""

    account: Account
    level: int
    children: tuple["AccountNode", ...] = ()


@dataclass(frozen=True)
class TrialBalanceRow:
    code: str
    name: str
    type: AccountType
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a bulk account import."""

    imported: int
    skipped: list[str] = field(default_factory=list)
    account_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class EquationCheck:
    """Result of verifying Assets = Liabilities + Equity + Net income."""

    assets: Decimal
    liabilities: Decimal
    equity: Decimal
    net_income: Decimal
    difference: Decimal
    balanced: bool


@dataclass(frozen=True)
class StatementSection:
    """Accounts of one type and their flat-sum total."""

    type: AccountType
    accounts: tuple[Account, ...]
    total: Decimal
