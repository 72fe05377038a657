"""Transport boundary for outgoing chat messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class Publisher(Protocol):
    """Anything that can publish a message envelope to a channel.

    Returns ``True`` when the transport accepted the message.
    """

    async def publish(self, channel: str, message: dict[str, Any]) -> bool: ...


@dataclass
class PublishedMessage:
    channel: str
    message: dict[str, Any]


@dataclass
class InMemoryPublisher:
    """Publisher that keeps messages in a list; used by the CLI, web app and tests."""

    fail: bool = False
    published: list[PublishedMessage] = field(default_factory=list)

    async def publish(self, channel: str, message: dict[str, Any]) -> bool:
        if self.fail:
            return False
        self.published.append(PublishedMessage(channel=channel, message=dict(message)))
        return True

    def messages(self, channel: str | None = None) -> list[dict[str, Any]]:
        return [
            p.message for p in self.published if channel is None or p.channel == channel
        ]
