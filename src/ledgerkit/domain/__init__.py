"""Domain layer for ledgerkit.

Services are imported from their modules (``ledgerkit.domain.account``,
``ledgerkit.domain.posting``...) so that the database layer can depend on
the entities here without an import cycle.
"""

from ledgerkit.domain.entities import (
    Account,
    AccountStatus,
    AccountType,
    NormalSide,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from ledgerkit.domain.errors import DomainError

__all__ = [
    "Account",
    "AccountStatus",
    "AccountType",
    "NormalSide",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "DomainError",
]
