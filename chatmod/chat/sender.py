"""Send chat messages through the moderation pipeline.

``MessageSender`` is the caller the pipeline was built for: it trims the
input, asks for a verdict, publishes the (possibly rewritten) text and
keeps analytics.  Publication is asynchronous; moderation is not.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from chatmod.chat.publisher import Publisher
from chatmod.log import get_logger
from chatmod.moderation.models import ModerationVerdict
from chatmod.moderation.pipeline import ModerationPipeline
from chatmod.moderation.stats import ModerationStats

logger = get_logger(__name__)

SendStatus = Literal["sent", "blocked", "failed", "empty"]

FILTERED_NOTICE = "Message was auto-filtered for content"


def _timestamp(now_ms: int | None = None) -> str:
    if now_ms is None:
        return datetime.now(timezone.utc).isoformat()
    return datetime.fromtimestamp(now_ms / 1000, timezone.utc).isoformat()


@dataclass
class SendResult:
    """What happened to one send attempt."""

    status: SendStatus
    verdict: ModerationVerdict | None = None
    message: dict[str, Any] = field(default_factory=dict)
    notice: str = ""

    @property
    def sent(self) -> bool:
        return self.status == "sent"


class MessageSender:
    """Moderate, then publish, messages on a single channel."""

    def __init__(
        self,
        pipeline: ModerationPipeline,
        publisher: Publisher,
        channel: str,
        stats: ModerationStats | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.publisher = publisher
        self.channel = channel
        self.stats = stats or ModerationStats()

    async def send(
        self,
        sender_id: str,
        username: str,
        text: str,
        now_ms: int | None = None,
    ) -> SendResult:
        text = text.strip()
        if not text:
            return SendResult(status="empty")

        verdict = self.pipeline.evaluate(sender_id, text, now_ms)
        self.stats.record_verdict(verdict)

        if not verdict.accepted:
            return SendResult(status="blocked", verdict=verdict, notice=verdict.blocked_message)

        message = {
            "text": verdict.output_text,
            "username": username,
            "userId": sender_id,
            "timestamp": _timestamp(now_ms),
            "moderated": verdict.was_transformed,
        }
        if not await self.publisher.publish(self.channel, message):
            logger.warning("Failed to publish message from %s to %s", sender_id, self.channel)
            return SendResult(
                status="failed", verdict=verdict, message=message, notice="Failed to send message"
            )

        self.stats.record_sent(verdict)
        notice = FILTERED_NOTICE if verdict.was_transformed else ""
        return SendResult(status="sent", verdict=verdict, message=message, notice=notice)

    async def send_system(self, text: str) -> bool:
        """Publish an unmoderated system announcement."""
        message = {
            "text": text,
            "username": "System",
            "userId": "system",
            "timestamp": _timestamp(),
            "isSystem": True,
        }
        return await self.publisher.publish(self.channel, message)
