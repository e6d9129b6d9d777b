"""Shared rendering of transactions and pipeline outcomes."""

import click

from paylog.domain.entities import (
    OutcomeStatus,
    ParsedTransaction,
    PersistedTransaction,
    PipelineStatistics,
    ProcessOutcome,
)


def echo_transaction(transaction: ParsedTransaction) -> None:
    """Print the extracted fields of a transaction."""
    click.echo(f"  Amount:     {transaction.amount}")
    click.echo(f"  Type:       {transaction.type.value}")
    click.echo(f"  Account:    {transaction.account or '-'}")
    click.echo(f"  Date:       {transaction.date}")
    click.echo(f"  Time:       {transaction.time}")
    click.echo(f"  Confidence: {transaction.confidence * 100:.1f}%")
    if isinstance(transaction, PersistedTransaction) and transaction.id:
        click.echo(f"  ID:         {transaction.id}")


def echo_outcome(outcome: ProcessOutcome) -> None:
    """Print a pipeline outcome; rejections go to stderr."""
    if outcome.status is OutcomeStatus.DUPLICATE:
        click.echo("Duplicate message, already processed")
        return

    if outcome.status is OutcomeStatus.REJECTED:
        click.echo(f"Rejected ({outcome.reason.value}):", err=True)
        for error in outcome.errors:
            click.echo(f"  {error}", err=True)
        return

    if outcome.queued:
        click.echo("Transaction accepted and queued for sync:")
    else:
        click.echo("Transaction saved:")
    echo_transaction(outcome.transaction)
    for warning in outcome.warnings:
        click.echo(f"  Warning: {warning}")


def echo_statistics(stats: PipelineStatistics) -> None:
    for key, value in stats.as_dict().items():
        label = key.replace("_", " ").capitalize()
        click.echo(f"  {label}: {value}")
