"""Moderation pipeline — duplicate, profanity, rate-limit and caps checks.

Every outgoing chat message passes through ``ModerationPipeline.evaluate``
before it is published.
"""

from chatmod.moderation.models import (
    MessageRecord,
    ModerationConfig,
    ModerationInputError,
    ModerationVerdict,
    ReasonCode,
    SenderModerationState,
)
from chatmod.moderation.pipeline import ModerationPipeline

__all__ = [
    "MessageRecord",
    "ModerationConfig",
    "ModerationInputError",
    "ModerationPipeline",
    "ModerationVerdict",
    "ReasonCode",
    "SenderModerationState",
]
