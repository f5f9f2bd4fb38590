"""Account management commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.account import AccountRegistry
from ledgerkit.domain.entities import AccountNode, AccountStatus
from ledgerkit.domain.errors import DomainError
from ledgerkit.utils.amount_parser import parse_amount

ACCOUNT_TYPE_CHOICES = ["asset", "liability", "equity", "revenue", "expense"]


def format_balance(amount) -> str:
    return f"{amount:,.2f}"


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPE_CHOICES, case_sensitive=False),
    help="Account type",
)
@click.option("--parent", help="Parent account code or ID")
@click.option("--balance", default="0", help="Opening balance (default 0)")
@click.option("--description", help="Description")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    parent: str | None,
    balance: str,
    description: str | None,
):
    """Create a new account.

    Examples:
        ledgerkit account create 1000 "Assets" --type asset
        ledgerkit account create 1110 "Cash" --type asset --parent 1000
        ledgerkit account create 2110 "Accounts Payable" --type liability --balance 200
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, registry, parent)

    try:
        opening = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        account = registry.create_account(
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            initial_balance=opening,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account {account.code} '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPE_CHOICES, case_sensitive=False),
    help="Only accounts of this type",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in AccountStatus]),
    help="Only accounts with this status",
)
@click.option("--search", help="Text to match in code, name or description")
@click.pass_context
def list_accounts(ctx, account_type: str | None, status: str | None, search: str | None):
    """List accounts ordered by code."""
    db = ctx.obj["db"]
    registry = AccountRegistry(db)

    accounts = registry.list_accounts(
        account_type=account_type,
        status=AccountStatus(status) if status else None,
        search=search,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        flags = " [imported]" if acc.is_imported else ""
        click.echo(
            f"{acc.code:10s} | {acc.name:30s} | {acc.type.value:11s} | "
            f"{format_balance(acc.balance):>15s} | {acc.status.value}{flags}"
        )


def _echo_node(node: AccountNode) -> None:
    indent = "    " * node.level
    acc = node.account
    click.echo(f"{indent}{acc.code} {acc.name} ({format_balance(acc.balance)})")
    for child in node.children:
        _echo_node(child)


@account_group.command("tree")
@click.pass_context
def account_tree(ctx):
    """Show the chart of accounts as a tree."""
    db = ctx.obj["db"]
    registry = AccountRegistry(db)

    tree = registry.build_hierarchy()
    if not tree:
        click.echo("No accounts found.")
        return

    for node in tree:
        _echo_node(node)


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--code", help="New account code")
@click.option("--name", help="New account name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPE_CHOICES, case_sensitive=False),
    help="New account type (only while the account has no transactions)",
)
@click.option("--parent", help="New parent account code or ID, or empty string for none")
@click.option("--description", help="New description, or empty string to remove it")
@click.pass_context
def update_account(
    ctx,
    account: str,
    code: str | None,
    name: str | None,
    account_type: str | None,
    parent: str | None,
    description: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account code or ID. Only the given fields change.

    Examples:
        ledgerkit account update 1110 --name "Cash on Hand"
        ledgerkit account update 1110 --parent 1100
        ledgerkit account update 1110 --parent ""  # Make it a root account
        ledgerkit account update 1110 --description ""
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    account_id = resolve_account_or_exit(ctx, registry, account)

    parent_id = None
    clear_parent = False
    if parent is not None:
        if parent == "":
            clear_parent = True
        else:
            parent_id = resolve_account_or_exit(ctx, registry, parent)

    clear_description = description is not None and not description.strip()
    if clear_description:
        description = None

    try:
        updated = registry.update_account(
            account_id=account_id,
            code=code,
            name=name,
            account_type=account_type,
            parent_id=parent_id,
            description=description,
            clear_parent=clear_parent,
            clear_description=clear_description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated account {updated.code} '{updated.name}'")


def _set_status(ctx, accounts: tuple[str, ...], status: AccountStatus) -> None:
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    account_ids = [resolve_account_or_exit(ctx, registry, acc) for acc in accounts]

    try:
        updated = registry.set_status(account_ids, status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for acc in updated:
        click.echo(f"Account {acc.code} is now {acc.status.value}")


@account_group.command("activate")
@click.argument("accounts", nargs=-1, required=True, metavar="ACCOUNT...")
@click.pass_context
def activate_accounts(ctx, accounts: tuple[str, ...]) -> None:
    """Mark accounts as active."""
    _set_status(ctx, accounts, AccountStatus.ACTIVE)


@account_group.command("deactivate")
@click.argument("accounts", nargs=-1, required=True, metavar="ACCOUNT...")
@click.pass_context
def deactivate_accounts(ctx, accounts: tuple[str, ...]) -> None:
    """Mark accounts as inactive. Inactive accounts accept no postings."""
    _set_status(ctx, accounts, AccountStatus.INACTIVE)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account code or ID.

    Imported accounts and accounts referenced by any transaction cannot be
    deleted. Child accounts become root accounts.

    Examples:
        ledgerkit account delete 1110
        ledgerkit account delete 1110 --yes
    """
    db = ctx.obj["db"]
    registry = AccountRegistry(db)
    account_id = resolve_account_or_exit(ctx, registry, account)
    account_obj = registry.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account {account_obj.code} '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        registry.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted account {account_obj.code} '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
