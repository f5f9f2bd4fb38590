"""Change notifications for read-side consumers.

The database publishes one ``ChangeEvent`` after each committed write.
Consumers that cache balances subscribe here to know when to refresh.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Callable

from ledgerkit.logging_setup import get_logger

logger = get_logger(__name__)

ACCOUNT_CREATED = "account.created"
ACCOUNT_UPDATED = "account.updated"
ACCOUNT_DELETED = "account.deleted"
ACCOUNTS_IMPORTED = "accounts.imported"
TRANSACTION_POSTED = "transaction.posted"
TRANSACTION_STATUS_CHANGED = "transaction.status_changed"


@dataclass(frozen=True)
class ChangeEvent:
    kind: str
    entity_ids: tuple[int, ...]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


Subscriber = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """In-process publish/subscribe channel for committed changes."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, kind: str, entity_ids: tuple[int, ...] | list[int]) -> ChangeEvent:
        """Deliver an event to every subscriber.

        A failing subscriber is logged and skipped; the write it reports on
        has already been committed.
        """
        event = ChangeEvent(kind=kind, entity_ids=tuple(entity_ids))
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.warning("Change subscriber %r failed for %s", callback, kind, exc_info=True)
        return event
