"""Tests for moderation analytics and logging setup."""

import logging

from chatmod.log import configure_logging, get_logger
from chatmod.moderation.models import ModerationVerdict, ReasonCode
from chatmod.moderation.stats import ModerationStats


def test_stats_counts():
    stats = ModerationStats(started_at=0.0)
    blocked = ModerationVerdict(accepted=False, reason_code=ReasonCode.RATE_LIMITED)
    filtered = ModerationVerdict(
        accepted=True, reason_code=ReasonCode.PROFANITY, output_text="***", was_transformed=True
    )
    clean = ModerationVerdict(accepted=True, output_text="hi")

    stats.record_verdict(blocked)
    for verdict in (filtered, clean):
        stats.record_verdict(verdict)
        stats.record_sent(verdict)

    assert stats.messages_sent == 2
    assert stats.messages_blocked == 1
    assert stats.messages_filtered == 1
    assert stats.messages_moderated == 2
    assert stats.by_reason == {"rate_limited": 1, "profanity": 1}


def test_messages_per_minute():
    stats = ModerationStats(messages_sent=30, started_at=0.0)
    assert stats.messages_per_minute(now=120.0) == 15.0
    assert stats.messages_per_minute(now=0.0) == 0.0
    assert stats.to_dict(now=60.0)["messages_per_minute"] == 30.0


def test_get_logger_namespace():
    assert get_logger("pipeline").name == "chatmod.pipeline"
    assert get_logger("chatmod.cli").name == "chatmod.cli"


def test_configure_logging_does_not_stack_handlers():
    configure_logging("info")
    configure_logging("debug")
    root = logging.getLogger("chatmod")
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    root.setLevel(logging.WARNING)
