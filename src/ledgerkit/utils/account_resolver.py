"""Utility for resolving account codes to IDs."""

from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.errors import AccountNotFoundError, account_code_not_found


def resolve_account(registry: AccountRegistry, account: str | int) -> int:
    """Resolve an account code or ID to an account ID.

    Codes take precedence: "1110" is looked up as a code first and only
    then as a numeric ID, since chart-of-accounts codes are usually digits.

    Raises:
        AccountNotFoundError: If no account matches
    """
    if isinstance(account, int):
        return registry.require_account(account).id

    by_code = registry.get_account_by_code(account)
    if by_code is not None:
        return by_code.id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        raise AccountNotFoundError(account_code_not_found(account))
    return registry.require_account(account_id).id
