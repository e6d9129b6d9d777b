"""Tests for the command line interface."""

from datetime import datetime, timedelta, UTC

import pytest

from paylog.cli.main import cli

MESSAGE = "Rs.500 debited from A/c XX1234"


@pytest.fixture
def received_at():
    """A UTC receipt time inside the retention window."""
    return (datetime.now(UTC) - timedelta(days=1)).strftime("%Y-%m-%d %H:%M")


def invoke(cli_runner, temp_db, *args, env=None):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], env=env)


def test_help(cli_runner):
    """Test help lists the commands."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("parse", "process", "manual", "import", "queue", "sync", "dedup", "list"):
        assert command in result.output


def test_parse_dry_run(cli_runner, temp_db):
    """Test parse prints extracted fields without storing."""
    result = invoke(cli_runner, temp_db, "parse", "Your a/c XXXX2323 debited with Rs.1,500.00 on 15-Dec-2024")

    assert result.exit_code == 0
    assert "Financial: yes" in result.output
    assert "1500.00" in result.output
    assert "debit" in result.output
    assert "XXXX2323" in result.output
    assert "2024-12-15" in result.output
    assert temp_db.transaction_store.count() == 0


def test_parse_not_a_transaction(cli_runner, temp_db):
    """Test parse on a chat message."""
    result = invoke(cli_runner, temp_db, "parse", "Hey, dinner at 8?")
    assert result.exit_code == 0
    assert "Financial: no" in result.output
    assert "No transaction found" in result.output


def test_process_saves(cli_runner, temp_db, received_at):
    """Test process stores a transaction."""
    result = invoke(cli_runner, temp_db, "process", MESSAGE, "--sender", "VM-HDFCBK", "--received-at", received_at)

    assert result.exit_code == 0
    assert "Transaction saved" in result.output
    assert "XX1234" in result.output
    assert temp_db.transaction_store.count() == 1


def test_process_duplicate(cli_runner, temp_db, received_at):
    """Test the same message processed twice."""
    args = ("process", MESSAGE, "--sender", "VM-HDFCBK", "--received-at", received_at)
    invoke(cli_runner, temp_db, *args)
    result = invoke(cli_runner, temp_db, *args)

    assert result.exit_code == 0
    assert "Duplicate" in result.output
    assert temp_db.transaction_store.count() == 1


def test_process_rejected(cli_runner, temp_db):
    """Test a rejected message exits with failure."""
    result = invoke(cli_runner, temp_db, "process", "Hey, dinner at 8?", "--sender", "FRIEND")
    assert result.exit_code == 1
    assert "not_financial" in result.output


def test_process_invalid_timestamp(cli_runner, temp_db):
    """Test an unparseable receipt time."""
    result = invoke(cli_runner, temp_db, "process", MESSAGE, "--sender", "BANK", "--received-at", "whenever")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_offline_queue_and_sync(cli_runner, temp_db, received_at):
    """Test offline processing queues and sync delivers."""
    env = {"PAYLOG_BACKOFF_BASE": "0"}
    result = invoke(
        cli_runner, temp_db, "--offline", "process", MESSAGE,
        "--sender", "VM-HDFCBK", "--received-at", received_at, env=env,
    )
    assert result.exit_code == 0
    assert "queued for sync" in result.output

    result = invoke(cli_runner, temp_db, "queue", "size")
    assert "Queued transactions: 1" in result.output

    result = invoke(cli_runner, temp_db, "queue", "list")
    assert "XX1234" in result.output

    result = invoke(cli_runner, temp_db, "--offline", "sync")
    assert "Synced 0 transactions, 1 remaining" in result.output

    result = invoke(cli_runner, temp_db, "sync")
    assert result.exit_code == 0
    assert "Synced 1 transactions, 0 remaining" in result.output
    assert temp_db.transaction_store.count() == 1


def test_manual_entry(cli_runner, temp_db):
    """Test manual entry is stored and flagged."""
    result = invoke(cli_runner, temp_db, "--owner", "alice", "manual", "Rs.250 paid to Swiggy via UPI", "--sender", "BANK")
    assert result.exit_code == 0

    [stored] = list(temp_db.transaction_store.query("alice"))
    assert stored.manual_entry

    result = invoke(cli_runner, temp_db, "--owner", "alice", "list")
    assert "manual" in result.output
    assert "-250" in result.output


def test_list_empty(cli_runner, temp_db):
    """Test listing with no transactions."""
    result = invoke(cli_runner, temp_db, "list")
    assert result.exit_code == 0
    assert "No transactions found" in result.output


def test_import_csv(cli_runner, temp_db, tmp_path, received_at):
    """Test importing a CSV of messages."""
    csv_file = tmp_path / "messages.csv"
    csv_file.write_text(
        "sender,content,received_at\n"
        f'VM-HDFCBK,"{MESSAGE}",{received_at}\n'
        f'VM-HDFCBK,"{MESSAGE}",{received_at}\n'
        f"FRIEND,\"Hey, dinner at 8?\",{received_at}\n"
        "BANK,Rs.100 paid,someday\n",
        encoding="utf-8",
    )

    result = invoke(cli_runner, temp_db, "import", str(csv_file))

    assert result.exit_code == 0
    assert "Accepted: 1 transactions" in result.output
    assert "Skipped: 1 duplicates" in result.output
    assert "Rejected: 1 messages" in result.output
    assert "Row 5" in result.output


def test_import_missing_columns(cli_runner, temp_db, tmp_path):
    """Test a CSV without the required columns."""
    csv_file = tmp_path / "bad.csv"
    csv_file.write_text("from,text\nBANK,Rs.1 paid\n", encoding="utf-8")

    result = invoke(cli_runner, temp_db, "import", str(csv_file))
    assert result.exit_code == 1
    assert "missing required columns" in result.output


def test_dedup_commands(cli_runner, temp_db, received_at):
    """Test dedup count and cleanup."""
    invoke(cli_runner, temp_db, "process", MESSAGE, "--sender", "VM-HDFCBK", "--received-at", received_at)

    result = invoke(cli_runner, temp_db, "dedup", "count")
    assert "Remembered messages: 1" in result.output

    result = invoke(cli_runner, temp_db, "dedup", "cleanup")
    assert "Removed 0 entries older than 90 days" in result.output

    result = invoke(cli_runner, temp_db, "dedup", "cleanup", "--max-age-days", "0")
    assert result.exit_code == 1


def test_invalid_environment(cli_runner, temp_db):
    """Test unusable environment settings are reported."""
    result = invoke(cli_runner, temp_db, "queue", "size", env={"PAYLOG_SAVE_RETRIES": "many"})
    assert result.exit_code == 1
    assert "Error: Invalid value for PAYLOG_SAVE_RETRIES" in result.output
