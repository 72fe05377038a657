"""In-memory moderation analytics."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field

from chatmod.moderation.models import ModerationVerdict, ReasonCode


@dataclass
class ModerationStats:
    """Counters for sent, blocked and filtered messages."""

    messages_sent: int = 0
    messages_blocked: int = 0
    messages_filtered: int = 0
    by_reason: Counter = field(default_factory=Counter)
    started_at: float = field(default_factory=time.time)

    @property
    def messages_moderated(self) -> int:
        return self.messages_blocked + self.messages_filtered

    def record_verdict(self, verdict: ModerationVerdict) -> None:
        if verdict.reason_code is not ReasonCode.NONE:
            self.by_reason[verdict.reason_code.value] += 1
        if not verdict.accepted:
            self.messages_blocked += 1

    def record_sent(self, verdict: ModerationVerdict) -> None:
        self.messages_sent += 1
        if verdict.was_transformed:
            self.messages_filtered += 1

    def messages_per_minute(self, now: float | None = None) -> float:
        elapsed = ((now if now is not None else time.time()) - self.started_at) / 60
        if elapsed <= 0:
            return 0.0
        return round(self.messages_sent / elapsed, 1)

    def to_dict(self, now: float | None = None) -> dict:
        return {
            "messages_sent": self.messages_sent,
            "messages_blocked": self.messages_blocked,
            "messages_filtered": self.messages_filtered,
            "messages_moderated": self.messages_moderated,
            "messages_per_minute": self.messages_per_minute(now),
            "by_reason": dict(self.by_reason),
        }
