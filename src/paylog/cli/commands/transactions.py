"""Stored transaction listing command."""

from itertools import islice

import click

from paylog.domain.entities import signed_amount


@click.command("list")
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum transactions to show")
@click.pass_context
def list_transactions(ctx, limit: int):
    """List stored transactions for the current owner, newest first."""
    db = ctx.obj["db"]
    settings = ctx.obj["settings"]

    transactions = list(islice(db.transaction_store.query(settings.owner_id), max(limit, 0)))
    if not transactions:
        click.echo("No transactions found")
        return

    click.echo(f"{'Date':<10} {'Time':<8} {'Amount':>12}  {'Account':<14} Source")
    click.echo("-" * 80)
    for txn in transactions:
        amount = signed_amount(txn.amount, txn.type)
        source = "manual" if txn.manual_entry else txn.source_sender
        click.echo(f"{txn.date:<10} {txn.time:<8} {amount:>12}  {(txn.account or '-'):<14} {source}")


def register_commands(cli):
    """Register list command with main CLI."""
    cli.add_command(list_transactions)
