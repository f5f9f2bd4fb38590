"""Account ledger command."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.projection import BalanceProjector


@click.command("ledger")
@click.argument("account", metavar="ACCOUNT")
@date_range_options
@click.option("--search", help="Text to match in description or reference")
@click.pass_context
def show_ledger(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    search: str | None,
):
    """Show the ledger of an account with a running balance.

    The running balance starts from the account's current balance and adds
    each transaction in date order; it is not a historical balance.

    Examples:
        ledgerkit ledger 1110
        ledgerkit ledger 1110 --start-date 2024-01-01 --search invoice
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    projector = BalanceProjector(db)

    account_id = resolve_account_or_exit(ctx, registry, account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
    )

    account_obj = registry.require_account(account_id)
    lines = projector.account_ledger(account_id, start_date=start, end_date=end, search=search)

    click.echo(f"\nLedger: {account_obj.code} {account_obj.name} ({account_obj.type.value})")
    click.echo(f"Current balance: {account_obj.balance:,.2f}")
    if not lines:
        click.echo("No transactions found.")
        return

    click.echo("-" * 90)
    click.echo(
        f"{'Date':10s} | {'Description':30s} | {'Debit':>12s} | {'Credit':>12s} | {'Balance':>14s}"
    )
    for line in lines:
        debit = f"{line.debit:,.2f}" if line.debit else "-"
        credit = f"{line.credit:,.2f}" if line.credit else "-"
        click.echo(
            f"{line.date} | {line.description[:30]:30s} | {debit:>12s} | {credit:>12s} | "
            f"{line.running_balance:>14,.2f}"
        )


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(show_ledger)
