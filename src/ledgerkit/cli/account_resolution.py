"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.errors import NotFoundError
from ledgerkit.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, registry: AccountRegistry, account: str | int
) -> int:
    """Resolve account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(registry, account)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
