"""Tests for the moderated send path."""

import asyncio

from chatmod.chat import InMemoryPublisher, MessageSender
from chatmod.moderation import ModerationConfig, ModerationPipeline, ReasonCode


def _sender(publisher=None, **config) -> MessageSender:
    pipeline = ModerationPipeline(ModerationConfig(**config))
    return MessageSender(pipeline, publisher or InMemoryPublisher(), channel="room")


def test_send_publishes_envelope():
    sender = _sender()
    result = asyncio.run(sender.send("u1", "Alice", "  Hello there  ", now_ms=0))
    assert result.sent
    assert result.notice == ""
    messages = sender.publisher.messages("room")
    assert len(messages) == 1
    msg = messages[0]
    assert msg["text"] == "Hello there"
    assert msg["username"] == "Alice"
    assert msg["userId"] == "u1"
    assert msg["moderated"] is False
    assert msg["timestamp"].endswith("+00:00")
    assert sender.stats.messages_sent == 1


def test_send_filtered_message_sets_moderated_flag():
    sender = _sender()
    result = asyncio.run(sender.send("u1", "Alice", "buy SPAM now", now_ms=0))
    assert result.sent
    assert result.message["text"] == "buy *** now"
    assert result.message["moderated"] is True
    assert result.notice == "Message was auto-filtered for content"
    assert sender.stats.messages_filtered == 1
    assert sender.stats.by_reason["profanity"] == 1


def test_send_blocked_message_is_not_published():
    sender = _sender()
    asyncio.run(sender.send("u1", "Alice", "Hello World", now_ms=0))
    result = asyncio.run(sender.send("u1", "Alice", "Hello World", now_ms=1000))
    assert result.status == "blocked"
    assert result.verdict.reason_code == ReasonCode.DUPLICATE_EXACT
    assert result.notice == "Message blocked: Duplicate message detected"
    assert len(sender.publisher.messages()) == 1
    assert sender.stats.messages_blocked == 1
    assert sender.stats.messages_moderated == 1


def test_send_empty_text_skips_moderation():
    sender = _sender()
    result = asyncio.run(sender.send("u1", "Alice", "   "))
    assert result.status == "empty"
    assert result.verdict is None
    assert sender.pipeline.get_state("u1") is None


def test_send_publish_failure():
    sender = _sender(publisher=InMemoryPublisher(fail=True))
    result = asyncio.run(sender.send("u1", "Alice", "Hello World", now_ms=0))
    assert result.status == "failed"
    assert result.notice == "Failed to send message"
    assert sender.stats.messages_sent == 0


def test_send_system_message_bypasses_moderation():
    sender = _sender()
    assert asyncio.run(sender.send_system("spam spam spam"))
    msg = sender.publisher.messages("room")[0]
    assert msg["text"] == "spam spam spam"
    assert msg["userId"] == "system"
    assert msg["isSystem"] is True
    assert sender.pipeline.senders() == []


def test_send_timestamp_follows_explicit_time():
    sender = _sender()
    result = asyncio.run(sender.send("u1", "Alice", "Hello there", now_ms=1_700_000_000_000))
    assert result.message["timestamp"] == "2023-11-14T22:13:20+00:00"
