"""Financial report commands."""

import click
from ledgerkit.domain.entities import StatementSection
from ledgerkit.domain.projection import BalanceProjector
from ledgerkit.domain.reconciliation import ReconciliationChecker, totals


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("trial-balance")
@click.pass_context
def trial_balance(ctx):
    """Show the trial balance and whether debits equal credits."""
    db = ctx.obj["db"]
    checker = ReconciliationChecker(db)

    rows = checker.trial_balance()
    if not rows:
        click.echo("No accounts found.")
        return

    click.echo(f"{'Code':10s} | {'Name':30s} | {'Debit':>14s} | {'Credit':>14s}")
    click.echo("-" * 78)
    for row in rows:
        debit = f"{row.debit:,.2f}" if row.debit else "-"
        credit = f"{row.credit:,.2f}" if row.credit else "-"
        click.echo(f"{row.code:10s} | {row.name[:30]:30s} | {debit:>14s} | {credit:>14s}")

    total_debits, total_credits = totals(rows)
    click.echo("-" * 78)
    click.echo(f"{'Total':10s} | {'':30s} | {total_debits:>14,.2f} | {total_credits:>14,.2f}")

    if checker.is_balanced(rows):
        click.echo("\nBalanced")
    else:
        click.echo(f"\nOut of balance by {abs(total_debits - total_credits):,.2f}")
        ctx.exit(2)


def _echo_sections(sections: list[StatementSection]) -> None:
    for section in sections:
        click.echo(f"\n{section.type.value}")
        for acc in section.accounts:
            click.echo(f"  {acc.code:10s} {acc.name[:40]:40s} {acc.balance:>14,.2f}")
        click.echo(f"  {'Total ' + section.type.value:51s} {section.total:>14,.2f}")


@report_group.command("balance-sheet")
@click.pass_context
def balance_sheet(ctx):
    """Show assets, liabilities and equity.

    Totals are flat sums of every account of a type; parent accounts are
    not rolled up from their children.
    """
    db = ctx.obj["db"]
    projector = BalanceProjector(db)

    _echo_sections(projector.balance_sheet())
    click.echo(f"\nAssets - Liabilities - Equity: {projector.balance_check():,.2f}")


@report_group.command("income-statement")
@click.pass_context
def income_statement(ctx):
    """Show revenue, expenses and net income."""
    db = ctx.obj["db"]
    projector = BalanceProjector(db)

    _echo_sections(projector.income_statement())
    click.echo(f"\nNet income: {projector.net_income():,.2f}")


@report_group.command("equation")
@click.pass_context
def equation(ctx):
    """Check Assets = Liabilities + Equity + Net income."""
    db = ctx.obj["db"]
    checker = ReconciliationChecker(db)

    check = checker.verify_equation()
    click.echo(f"Assets:      {check.assets:>14,.2f}")
    click.echo(f"Liabilities: {check.liabilities:>14,.2f}")
    click.echo(f"Equity:      {check.equity:>14,.2f}")
    click.echo(f"Net income:  {check.net_income:>14,.2f}")
    click.echo(f"Difference:  {check.difference:>14,.2f}")
    if check.balanced:
        click.echo("\nBalanced")
    else:
        click.echo("\nNot balanced")
        ctx.exit(2)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
