"""Bulk import of messages from CSV exports."""

import csv
from pathlib import Path
from typing import Any

from paylog.domain.entities import OutcomeStatus, RawMessage
from paylog.domain.pipeline import TransactionPipeline
from paylog.utils.date_parser import parse_timestamp

REQUIRED_COLUMNS = ("sender", "content", "received_at")


class MessageImportService:
    """Service feeding a CSV of exported messages through the pipeline."""

    def __init__(self, pipeline: TransactionPipeline):
        """Initialize message import service.

        Args:
            pipeline: Pipeline every row is processed by
        """
        self.pipeline = pipeline

    def import_csv(self, csv_file_path: str) -> dict[str, Any]:
        """Process every row of a CSV file with sender, content and received_at columns.

        Args:
            csv_file_path: Path to CSV file

        Returns:
            Dict with import statistics:
            - accepted: transactions saved or queued
            - queued: accepted transactions waiting in the offline queue
            - duplicates: messages already processed
            - rejected: messages that did not yield a valid transaction
            - errors: list of row level error messages

        Raises:
            ValueError: If required columns are missing
            FileNotFoundError: If CSV file doesn't exist
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        accepted = 0
        queued = 0
        duplicates = 0
        rejected = 0
        errors = []

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)

            if reader.fieldnames is None:
                raise ValueError("CSV file has no columns")
            columns = {name.strip().lower() for name in reader.fieldnames}
            missing = [col for col in REQUIRED_COLUMNS if col not in columns]
            if missing:
                raise ValueError(f"CSV file missing required columns: {', '.join(missing)}")

            for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
                values = {key.strip().lower(): (value or "").strip() for key, value in row.items() if key}

                try:
                    received_at = parse_timestamp(values["received_at"])
                except ValueError as e:
                    errors.append(f"Row {row_num}: {e}")
                    continue

                message = RawMessage(
                    sender=values["sender"],
                    content=values["content"],
                    received_at=received_at,
                )
                outcome = self.pipeline.process_incoming(message)

                if outcome.status is OutcomeStatus.ACCEPTED:
                    accepted += 1
                    if outcome.queued:
                        queued += 1
                elif outcome.status is OutcomeStatus.DUPLICATE:
                    duplicates += 1
                else:
                    rejected += 1
                    if outcome.reason is not None:
                        errors.append(f"Row {row_num}: {outcome.reason.value}")

        return {
            "accepted": accepted,
            "queued": queued,
            "duplicates": duplicates,
            "rejected": rejected,
            "errors": errors,
        }
