"""Main CLI entry point."""

from dataclasses import replace

import click

from paylog.app import create_pipeline
from paylog.cli.error_handling import handle_domain_error
from paylog.config import ConfigError, load_settings
from paylog.database.factories import create_sqlite_database
from paylog.logging_config import setup_logging

# Import and register all commands at module level
from paylog.cli.commands import (
    parse,
    process,
    import_cmd,
    queue,
    dedup,
    transactions,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYLOG_DB_PATH environment variable)",
    envvar="PAYLOG_DB_PATH",
)
@click.option(
    "--owner",
    help="Owner ID stamped on transactions (overrides PAYLOG_OWNER_ID environment variable)",
    envvar="PAYLOG_OWNER_ID",
)
@click.option("--offline", is_flag=True, help="Treat the transaction store as unreachable")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for diagnostics on stderr",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(ctx, db_path: str | None, owner: str | None, offline: bool, log_level: str, json_logs: bool):
    """Paylog - turn bank SMS notifications into transaction records.

    Messages are parsed, validated and deduplicated before being stored. When
    the store is unreachable (--offline) accepted transactions wait in a
    local queue until `paylog sync` pushes them.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level=log_level, json_output=json_logs)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings()
        except ConfigError as e:
            handle_domain_error(ctx, e)
        if owner:
            settings = replace(settings, owner_id=owner)
        if db_path:
            settings = replace(settings, db_path=db_path)

        db = create_sqlite_database(database_path=settings.db_path, online=not offline)
        ctx.call_on_close(db.disconnect)
        ctx.obj["settings"] = settings
        ctx.obj["db"] = db
        ctx.obj["pipeline"] = create_pipeline(db, settings)


# Register all commands
parse.register_commands(cli)
process.register_commands(cli)
import_cmd.register_commands(cli)
queue.register_commands(cli)
dedup.register_commands(cli)
transactions.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
