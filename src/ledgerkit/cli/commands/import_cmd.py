"""Chart-of-accounts CSV import command."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.csv_import import CSVImportService
from ledgerkit.domain.errors import DomainError


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import accounts from a CSV file.

    The header must include code, name and type. Optional columns are
    parentcode, description and balance. Existing codes are skipped.

    Examples:
        ledgerkit import chart_of_accounts.csv
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)

    try:
        result = service.import_csv(csv_file_path=csv_file)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} accounts")
    click.echo(f"  Skipped: {len(result.skipped)} existing or invalid rows")
    if result.skipped:
        click.echo(f"    {', '.join(result.skipped)}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
