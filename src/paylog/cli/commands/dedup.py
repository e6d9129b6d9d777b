"""Duplicate store maintenance commands."""

from datetime import timedelta

import click


@click.group("dedup")
def dedup_group():
    """Maintain the record of processed messages."""
    pass


@dedup_group.command("count")
@click.pass_context
def dedup_count(ctx):
    """Show how many processed messages are remembered."""
    pipeline = ctx.obj["pipeline"]
    click.echo(f"Remembered messages: {pipeline.duplicate_detector.count()}")


@dedup_group.command("cleanup")
@click.option(
    "--max-age-days",
    type=int,
    help="Forget messages first seen more than this many days ago (default: PAYLOG_DEDUP_MAX_AGE_DAYS or 90)",
)
@click.pass_context
def dedup_cleanup(ctx, max_age_days: int | None):
    """Forget processed messages older than the retention period."""
    pipeline = ctx.obj["pipeline"]
    settings = ctx.obj["settings"]

    days = max_age_days if max_age_days is not None else settings.dedup_max_age_days
    if days < 1:
        click.echo("Error: --max-age-days must be at least 1", err=True)
        ctx.exit(1)

    removed = pipeline.duplicate_detector.cleanup(timedelta(days=days))
    click.echo(f"Removed {removed} entries older than {days} days")


def register_commands(cli):
    """Register dedup commands with main CLI."""
    cli.add_command(dedup_group)
