"""Double-entry posting domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    Account,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from ledgerkit.domain.errors import (
    AccountInactiveError,
    AccountNotFoundError,
    InvalidStatusTransitionError,
    NonPositiveAmountError,
    SameAccountError,
    TransactionNotFoundError,
    ValidationError,
    account_inactive,
    account_not_found,
    transaction_not_found,
)
from ledgerkit.domain.polarity import posting_deltas, reversal_deltas
from ledgerkit.logging_setup import get_logger
from ledgerkit.utils.amount_parser import to_cents

logger = get_logger(__name__)

MAX_AMOUNT = Decimal("999999999")

# Allowed status changes. Entering POSTED applies the balance effect,
# entering VOID from POSTED or RECONCILED reverses it.
STATUS_TRANSITIONS: dict[TransactionStatus, frozenset[TransactionStatus]] = {
    TransactionStatus.PENDING: frozenset({TransactionStatus.POSTED, TransactionStatus.VOID}),
    TransactionStatus.POSTED: frozenset({TransactionStatus.RECONCILED, TransactionStatus.VOID}),
    TransactionStatus.RECONCILED: frozenset({TransactionStatus.VOID}),
    TransactionStatus.VOID: frozenset(),
}


class LedgerPoster:
    """Service applying two-leg transactions to account balances."""

    def __init__(self, db: Database):
        """Initialize ledger poster.

        Args:
            db: Database instance
        """
        self.db = db

    def post(
        self,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal | int | str,
        txn_date: Optional[date] = None,
        txn_type: TransactionType = TransactionType.ADJUSTMENT,
        description: str = "",
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
        status: TransactionStatus = TransactionStatus.POSTED,
    ) -> Transaction:
        """Record a transaction and, when posted, apply it to both accounts.

        The transaction record and both balance changes are committed
        together. A pending transaction is recorded without touching
        balances until it is moved to posted.

        Args:
            debit_account_id: Account receiving the debit leg
            credit_account_id: Account receiving the credit leg
            amount: Positive amount
            txn_date: Transaction date (today if None)
            txn_type: Informational transaction type
            description: Description
            reference: Optional external document number
            notes: Optional notes
            created_by: Optional user identifier
            status: PENDING or POSTED

        Returns:
            The stored transaction

        Raises:
            SameAccountError: If both legs use the same account
            NonPositiveAmountError: If amount is not greater than zero
            AccountNotFoundError: If either account doesn't exist
            AccountInactiveError: If either account is inactive
            ConsistencyError: If the write failed (nothing was stored)
        """
        if status not in (TransactionStatus.PENDING, TransactionStatus.POSTED):
            raise ValidationError("New transactions must be pending or posted")
        if debit_account_id == credit_account_id:
            raise SameAccountError("Debit and credit accounts must be different")

        try:
            amount = to_cents(amount)
        except ValueError as e:
            raise ValidationError(str(e))
        if amount <= 0:
            raise NonPositiveAmountError("Amount must be greater than zero")
        if amount > MAX_AMOUNT:
            raise ValidationError("Amount is too large")

        description = (description or "").strip()
        self._check_length("Description", description, 500)
        self._check_length("Reference", reference, 100)
        self._check_length("Notes", notes, 1000)

        debit_account = self._require_postable(debit_account_id)
        credit_account = self._require_postable(credit_account_id)

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                txn_date=txn_date if txn_date is not None else date.today(),
                txn_type=txn_type,
                description=description,
                debit_account_id=debit_account_id,
                credit_account_id=credit_account_id,
                amount=amount,
                status=status,
                reference=reference,
                notes=notes,
                created_by=created_by,
            )
            if status is TransactionStatus.POSTED:
                self._apply(debit_account, credit_account, amount)

        logger.info(
            "Recorded %s transaction %d: debit %s, credit %s, amount %s",
            status.value,
            transaction_id,
            debit_account.code,
            credit_account.code,
            amount,
        )
        return self.require_transaction(transaction_id)

    def void(self, transaction_id: int) -> Transaction:
        """Void a transaction, reversing its balance effect if it had one.

        Raises:
            TransactionNotFoundError: If the transaction doesn't exist
            InvalidStatusTransitionError: If it is already void
        """
        return self.change_status(transaction_id, TransactionStatus.VOID)

    def change_status(self, transaction_id: int, status: TransactionStatus) -> Transaction:
        """Move a transaction to a new status.

        Balances change only when the transaction starts or stops
        participating in ledger totals: pending to posted applies the
        posting, posted or reconciled to void reverses it.

        Raises:
            TransactionNotFoundError: If the transaction doesn't exist
            InvalidStatusTransitionError: If the change is not allowed
            AccountNotFoundError: If a leg account no longer exists
            AccountInactiveError: If posting a pending transaction to an inactive account
            ConsistencyError: If the write failed (nothing was changed)
        """
        txn = self.require_transaction(transaction_id)
        if status not in STATUS_TRANSITIONS[txn.status]:
            raise InvalidStatusTransitionError(
                f"Cannot change transaction {transaction_id} from {txn.status.value} to {status.value}"
            )

        applies = status.affects_balances and not txn.status.affects_balances
        reverses = txn.status.affects_balances and not status.affects_balances

        if applies:
            debit_account = self._require_postable(txn.debit_account_id)
            credit_account = self._require_postable(txn.credit_account_id)
        else:
            debit_account = self._require_account(txn.debit_account_id)
            credit_account = self._require_account(txn.credit_account_id)

        with self.db.atomic():
            self.db.update_transaction_status(transaction_id, status)
            if applies:
                self._apply(debit_account, credit_account, txn.amount)
            elif reverses:
                self._reverse(debit_account, credit_account, txn.amount)

        logger.info(
            "Transaction %d changed from %s to %s", transaction_id, txn.status.value, status.value
        )
        return self.require_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        status: Optional[TransactionStatus] = None,
        txn_type: Optional[TransactionType] = None,
        search: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with filters, oldest first."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            statuses=[status] if status is not None else None,
            txn_type=txn_type,
            search=search,
        )

    def _apply(self, debit_account: Account, credit_account: Account, amount: Decimal) -> None:
        debit_delta, credit_delta = posting_deltas(debit_account.type, credit_account.type, amount)
        self.db.apply_balance_delta(debit_account.id, debit_delta)
        self.db.apply_balance_delta(credit_account.id, credit_delta)

    def _reverse(self, debit_account: Account, credit_account: Account, amount: Decimal) -> None:
        debit_delta, credit_delta = reversal_deltas(debit_account.type, credit_account.type, amount)
        self.db.apply_balance_delta(debit_account.id, debit_delta)
        self.db.apply_balance_delta(credit_account.id, credit_delta)

    def _require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def _require_postable(self, account_id: int) -> Account:
        account = self._require_account(account_id)
        if not account.is_active:
            raise AccountInactiveError(account_inactive(account.code))
        return account

    @staticmethod
    def _check_length(label: str, value: Optional[str], limit: int) -> None:
        if value is not None and len(value) > limit:
            raise ValidationError(f"{label} must not exceed {limit} characters")
