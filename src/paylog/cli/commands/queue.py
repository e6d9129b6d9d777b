"""Offline queue commands."""

import click


@click.group("queue")
def queue_group():
    """Inspect transactions waiting for sync."""
    pass


@queue_group.command("size")
@click.pass_context
def queue_size(ctx):
    """Show the number of queued transactions."""
    pipeline = ctx.obj["pipeline"]
    click.echo(f"Queued transactions: {pipeline.get_queue_size()}")


@queue_group.command("list")
@click.pass_context
def list_queue(ctx):
    """List queued transactions, oldest first."""
    db = ctx.obj["db"]
    queued = db.queue_store.list_queued()

    if not queued:
        click.echo("Queue is empty")
        return

    click.echo(f"{'ID':<38} {'Date':<10} {'Type':<7} {'Amount':>12}  Account")
    click.echo("-" * 80)
    for txn in queued:
        click.echo(f"{txn.id:<38} {txn.date:<10} {txn.type.value:<7} {txn.amount:>12}  {txn.account or '-'}")


@click.command("sync")
@click.pass_context
def sync(ctx):
    """Push queued transactions to the transaction store."""
    pipeline = ctx.obj["pipeline"]

    synced = pipeline.trigger_sync()
    remaining = pipeline.get_queue_size()
    click.echo(f"Synced {synced} transactions, {remaining} remaining in queue")


def register_commands(cli):
    """Register queue commands with main CLI."""
    cli.add_command(queue_group)
    cli.add_command(sync)
