"""Dry-run parse command."""

import click

from paylog.cli.output import echo_transaction
from paylog.domain.entities import RawMessage
from paylog.domain.parser import TransactionParser
from paylog.utils.date_parser import parse_timestamp


@click.command("parse")
@click.argument("text")
@click.option("--sender", default="UNKNOWN", show_default=True, help="Message sender")
@click.option(
    "--received-at",
    default="now",
    help="Receipt time (e.g., '2024-12-15 10:30', 'now', 'yesterday')",
)
@click.pass_context
def parse_message(ctx, text: str, sender: str, received_at: str):
    """Show what would be extracted from a message without storing anything.

    Examples:
        paylog parse "Rs.500 debited from A/c XX1234 on 15-12-2024"
    """
    try:
        timestamp = parse_timestamp(received_at)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    parser = TransactionParser()
    message = RawMessage(sender=sender, content=text, received_at=timestamp)
    context = parser.detector.classify(text)
    click.echo(f"Financial: {'yes' if context.is_financial else 'no'} (confidence {context.confidence:.2f})")
    if context.matched_keywords:
        click.echo(f"Keywords: {', '.join(sorted(context.matched_keywords))}")

    transaction = parser.parse(message)
    if transaction is None:
        click.echo("No transaction found")
        return

    click.echo("Transaction:")
    echo_transaction(transaction)


def register_commands(cli):
    """Register parse command with main CLI."""
    cli.add_command(parse_message)
