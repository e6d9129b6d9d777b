"""Commands pushing single messages through the pipeline."""

import click

from paylog.cli.output import echo_outcome
from paylog.domain.entities import OutcomeStatus, RawMessage
from paylog.utils.date_parser import parse_timestamp


@click.command("process")
@click.argument("text")
@click.option("--sender", required=True, help="Message sender (e.g., 'VM-HDFCBK')")
@click.option(
    "--received-at",
    default="now",
    help="Receipt time (e.g., '2024-12-15 10:30', 'now', 'yesterday')",
)
@click.pass_context
def process_message(ctx, text: str, sender: str, received_at: str):
    """Process an incoming message and store the transaction it describes.

    Examples:
        paylog process "Rs.500 debited from A/c XX1234" --sender VM-HDFCBK
        paylog process "INR 2,000 credited to a/c XX9876" --sender AD-SBIINB --received-at "2024-12-15 10:30"
    """
    pipeline = ctx.obj["pipeline"]

    try:
        timestamp = parse_timestamp(received_at)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    outcome = pipeline.process_incoming(RawMessage(sender=sender, content=text, received_at=timestamp))
    echo_outcome(outcome)
    if outcome.status is OutcomeStatus.REJECTED:
        ctx.exit(1)


@click.command("manual")
@click.argument("text")
@click.option("--sender", required=True, help="Message sender")
@click.pass_context
def manual_entry(ctx, text: str, sender: str):
    """Enter a message by hand, e.g. when it was not picked up automatically.

    Examples:
        paylog manual "Rs.250 paid to Swiggy via UPI" --sender BANK
    """
    pipeline = ctx.obj["pipeline"]

    outcome = pipeline.manual_entry(text, sender)
    echo_outcome(outcome)
    if outcome.status is OutcomeStatus.REJECTED:
        ctx.exit(1)


def register_commands(cli):
    """Register process commands with main CLI."""
    cli.add_command(process_message)
    cli.add_command(manual_entry)
