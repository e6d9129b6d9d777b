"""CSV import command."""

import click

from paylog.cli.output import echo_statistics
from paylog.domain.message_import import MessageImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_messages(ctx, csv_file: str):
    """Process messages from a CSV file with sender, content and received_at columns."""
    pipeline = ctx.obj["pipeline"]
    service = MessageImportService(pipeline)

    try:
        result = service.import_csv(csv_file_path=csv_file)
        click.echo(f"\nImport complete:")
        click.echo(f"  Accepted: {result['accepted']} transactions ({result['queued']} queued)")
        click.echo(f"  Skipped: {result['duplicates']} duplicates")
        click.echo(f"  Rejected: {result['rejected']} messages")
        if result["errors"]:
            click.echo(f"  Errors: {len(result['errors'])}")
            for error in result["errors"]:
                click.echo(f"    {error}", err=True)
        click.echo("\nPipeline statistics:")
        echo_statistics(pipeline.get_statistics())
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_messages)
