"""JSON import command."""

import click

from catorcena.cli.date_options import today_from
from catorcena.domain.json_import import JsonImportService


@click.command("import")
@click.argument("json_file", type=click.Path(exists=True))
@click.pass_context
def import_json(ctx, json_file: str):
    """Import movements, cards and debit accounts from a JSON file.

    The file holds an object with optional "movements", "cards",
    "debit_accounts" and "paid_marks" lists.
    """
    db = ctx.obj["db"]
    service = JsonImportService(db)

    try:
        result = service.import_file(json_file_path=json_file, today=today_from(ctx))
        click.echo("\nImport complete:")
        click.echo(f"  Imported: {result['imported']} records")
        if result["errors"]:
            click.echo(f"  Errors: {len(result['errors'])}")
            for error in result["errors"]:
                click.echo(f"    {error}", err=True)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_json)
