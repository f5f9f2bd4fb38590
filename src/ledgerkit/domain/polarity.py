"""Double-entry polarity rules.

Asset and Expense accounts increase on the debit side; Liability, Equity
and Revenue accounts increase on the credit side.
"""

from decimal import Decimal

from ledgerkit.domain.entities import AccountType, NormalSide


def balance_delta(account_type: AccountType, side: NormalSide, amount: Decimal) -> Decimal:
    """Return the change to an account's balance when one leg is applied.

    Args:
        account_type: Type of the account receiving the leg
        side: Whether the account is the debit or the credit leg
        amount: Positive leg amount

    Returns:
        ``+amount`` when the leg is on the account's normal side,
        ``-amount`` otherwise
    """
    if side is account_type.normal_side:
        return amount
    return -amount


def posting_deltas(
    debit_type: AccountType, credit_type: AccountType, amount: Decimal
) -> tuple[Decimal, Decimal]:
    """Return ``(debit_account_delta, credit_account_delta)`` for a posting."""
    return (
        balance_delta(debit_type, NormalSide.DEBIT, amount),
        balance_delta(credit_type, NormalSide.CREDIT, amount),
    )


def reversal_deltas(
    debit_type: AccountType, credit_type: AccountType, amount: Decimal
) -> tuple[Decimal, Decimal]:
    """Return the deltas that undo :func:`posting_deltas`."""
    debit_delta, credit_delta = posting_deltas(debit_type, credit_type, amount)
    return -debit_delta, -credit_delta


def signed_effect(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Net balance effect of a debit and credit column pair on one account."""
    if account_type.normal_side is NormalSide.DEBIT:
        return debit - credit
    return credit - debit
