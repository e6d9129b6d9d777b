"""Tests for the message channel and connectivity signal."""

import threading

import pytest

from paylog.domain.channel import ChannelClosed, MessageChannel
from paylog.domain.connectivity import ConnectivitySignal


def test_channel_fifo(make_message):
    """Test messages are consumed in publish order."""
    channel = MessageChannel()
    messages = [make_message(f"Rs.{n} debited") for n in (1, 2, 3)]
    for message in messages:
        channel.publish(message)
    channel.close()

    assert list(channel) == messages


def test_publish_after_close(make_message):
    """Test closed channels refuse new messages."""
    channel = MessageChannel()
    channel.close()
    assert channel.closed
    with pytest.raises(ChannelClosed):
        channel.publish(make_message("Rs.1 debited"))


def test_drain_does_not_block(make_message):
    """Test drain hands over what is available and returns."""
    channel = MessageChannel()
    channel.publish(make_message("Rs.1 debited"))
    channel.publish(make_message("Rs.2 debited"))
    seen = []

    assert channel.drain(seen.append) == 2
    assert channel.drain(seen.append) == 0
    assert len(seen) == 2
    assert channel.pending() == 0


def test_consume_timeout():
    """Test consume stops after waiting without messages."""
    channel = MessageChannel()
    assert list(channel.consume(timeout=0.01)) == []


def test_consumer_thread(make_message):
    """Test a consumer thread receives messages from a producer."""
    channel = MessageChannel()
    received = []
    consumer = threading.Thread(target=lambda: received.extend(channel.consume()))
    consumer.start()

    for n in range(5):
        channel.publish(make_message(f"Rs.{n + 1} debited"))
    channel.close()
    consumer.join(timeout=5)

    assert [m.content for m in received] == [f"Rs.{n + 1} debited" for n in range(5)]


def test_connectivity_subscribe_and_emit():
    """Test subscribers see changes after subscribing."""
    signal = ConnectivitySignal()
    seen = []
    signal.emit(True)

    unsubscribe = signal.subscribe(seen.append)
    signal.emit(False)
    signal.emit(True)
    assert seen == [False, True]

    unsubscribe()
    unsubscribe()
    signal.emit(False)
    assert seen == [False, True]
    assert signal.subscriber_count == 0
