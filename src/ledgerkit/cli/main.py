"""Main CLI entry point."""

import click
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.logging_setup import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    import_cmd,
    post,
    transaction,
    ledger,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--log-level",
    help="Log level, e.g. INFO or DEBUG (overrides LEDGERKIT_LOG_LEVEL environment variable)",
    envvar="LEDGERKIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Ledgerkit - chart of accounts and double-entry ledger.

    Manage a hierarchical chart of accounts, post two-leg transactions and
    check the books with a trial balance.
    """
    ctx.ensure_object(dict)
    if log_level:
        configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
import_cmd.register_commands(cli)
post.register_commands(cli)
transaction.register_commands(cli)
ledger.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
