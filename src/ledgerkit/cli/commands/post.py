"""Post transaction command."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.entities import TransactionStatus, TransactionType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.posting import LedgerPoster
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date


@click.command("post")
@click.option("--debit", required=True, help="Debit account code or ID")
@click.option("--credit", required=True, help="Credit account code or ID")
@click.option("--amount", required=True, help="Positive amount (e.g., 500 or 1,234.56)")
@click.option(
    "--date",
    "txn_date",
    default="today",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType]),
    default=TransactionType.ADJUSTMENT.value,
    help="Transaction type (informational)",
)
@click.option("--description", default="", help="Description")
@click.option("--reference", help="External document number")
@click.option("--notes", help="Notes")
@click.option("--created-by", help="User recording the transaction")
@click.option("--pending", is_flag=True, help="Record as pending without touching balances")
@click.pass_context
def post_transaction(
    ctx,
    debit: str,
    credit: str,
    amount: str,
    txn_date: str,
    txn_type: str,
    description: str,
    reference: str | None,
    notes: str | None,
    created_by: str | None,
    pending: bool,
):
    """Post a two-leg transaction.

    Examples:
        ledgerkit post --debit 1110 --credit 4100 --amount 500 --type sale
        ledgerkit post --debit 5100 --credit 2110 --amount 150 --date 2024-01-15
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    poster = LedgerPoster(db)

    debit_id = resolve_account_or_exit(ctx, registry, debit)
    credit_id = resolve_account_or_exit(ctx, registry, credit)

    try:
        parsed_date = parse_date(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        txn = poster.post(
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=parsed_amount,
            txn_date=parsed_date,
            txn_type=TransactionType(txn_type),
            description=description,
            reference=reference,
            notes=notes,
            created_by=created_by,
            status=TransactionStatus.PENDING if pending else TransactionStatus.POSTED,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    debit_account = registry.require_account(debit_id)
    credit_account = registry.require_account(credit_id)
    click.echo(f"Recorded transaction {txn.id} ({txn.status.value})")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Debit: {debit_account.code} {debit_account.name} -> {debit_account.balance:,.2f}")
    click.echo(f"  Credit: {credit_account.code} {credit_account.name} -> {credit_account.balance:,.2f}")
    click.echo(f"  Amount: {txn.amount:,.2f}")


def register_commands(cli):
    """Register post command with main CLI."""
    cli.add_command(post_transaction)
