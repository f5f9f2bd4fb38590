"""Transaction management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.entities import TransactionStatus, TransactionType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.posting import LedgerPoster


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@date_range_options
@click.option("--account", help="Account code or ID (either leg)")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus]),
    help="Only transactions with this status",
)
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType]),
    help="Only transactions of this type",
)
@click.option("--search", help="Text to match in description or reference")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    account: str | None,
    status: str | None,
    txn_type: str | None,
    search: str | None,
) -> None:
    """List transactions, oldest first.

    Examples:
        ledgerkit transaction list --this-month
        ledgerkit transaction list --account 1110 --status posted
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    poster = LedgerPoster(db)

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

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, registry, account)

    transactions = poster.list_transactions(
        start_date=start,
        end_date=end,
        account_id=account_id,
        status=TransactionStatus(status) if status else None,
        txn_type=TransactionType(txn_type) if txn_type else None,
        search=search,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    codes = {acc.id: acc.code for acc in registry.list_accounts()}
    click.echo(
        f"{'ID':>5s} | {'Date':10s} | {'Type':10s} | {'Debit':10s} | {'Credit':10s} | "
        f"{'Amount':>14s} | {'Status':10s} | Description"
    )
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:5d} | {txn.date} | {txn.type.value:10s} | "
            f"{codes.get(txn.debit_account_id, '?'):10s} | {codes.get(txn.credit_account_id, '?'):10s} | "
            f"{txn.amount:>14,.2f} | {txn.status.value:10s} | {txn.description}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show one transaction."""
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    poster = LedgerPoster(db)

    try:
        txn = poster.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    debit = registry.get_account(txn.debit_account_id)
    credit = registry.get_account(txn.credit_account_id)
    click.echo(f"Transaction {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Status: {txn.status.value}")
    click.echo(f"  Debit: {debit.code + ' ' + debit.name if debit else txn.debit_account_id}")
    click.echo(f"  Credit: {credit.code + ' ' + credit.name if credit else txn.credit_account_id}")
    click.echo(f"  Amount: {txn.amount:,.2f}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    if txn.reference:
        click.echo(f"  Reference: {txn.reference}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.created_by:
        click.echo(f"  Created by: {txn.created_by}")


@transaction_group.command("set-status")
@click.argument("transaction_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in TransactionStatus]))
@click.pass_context
def set_status(ctx, transaction_id: int, status: str) -> None:
    """Change the status of a transaction.

    Moving a pending transaction to posted applies it to both accounts;
    voiding a posted or reconciled transaction reverses it.

    Examples:
        ledgerkit transaction set-status 7 posted
        ledgerkit transaction set-status 7 reconciled
    """
    db = ctx.obj["db"]
    poster = LedgerPoster(db)

    try:
        txn = poster.change_status(transaction_id, TransactionStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Transaction {txn.id} is now {txn.status.value}")


@transaction_group.command("void")
@click.argument("transaction_id", type=int)
@click.pass_context
def void_transaction(ctx, transaction_id: int) -> None:
    """Void a transaction and reverse its effect on balances."""
    db = ctx.obj["db"]
    poster = LedgerPoster(db)

    try:
        txn = poster.void(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Voided transaction {txn.id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
