"""Pydantic models for API request/response serialization.

These models mirror the chatmod dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Moderation models
# ---------------------------------------------------------------------------


class EvaluateRequest(BaseModel):
    """Request body for evaluating one message."""

    sender_id: str = Field(..., min_length=1)
    text: str
    now_ms: Optional[int] = Field(
        default=None, description="Explicit timestamp in ms; defaults to server time"
    )


class VerdictResponse(BaseModel):
    """Mirrors chatmod.moderation.models.ModerationVerdict."""

    accepted: bool
    reason_code: str = "none"
    reason: str = ""
    output_text: str = ""
    was_transformed: bool = False


class ModerationConfigResponse(BaseModel):
    """Mirrors chatmod.moderation.models.ModerationConfig."""

    blocked_terms: list[str] = Field(default_factory=list)
    max_messages_per_window: int
    rate_window_ms: int
    exact_duplicate_window_ms: int
    similar_duplicate_window_ms: int
    similarity_threshold: float
    caps_ratio_threshold: float
    min_length_for_caps_check: int
    history_size: int
    profanity_filter_enabled: bool
    rate_limit_enabled: bool
    caps_normalization_enabled: bool


class ToggleRequest(BaseModel):
    """Request body for flipping feature toggles.  Omitted toggles are unchanged."""

    profanity_filter_enabled: Optional[bool] = None
    rate_limit_enabled: Optional[bool] = None
    caps_normalization_enabled: Optional[bool] = None


class MessageRecordResponse(BaseModel):
    text: str
    sent_at_ms: int


class SenderStateResponse(BaseModel):
    """Mirrors chatmod.moderation.models.SenderModerationState."""

    sender_id: str
    recent_messages: list[MessageRecordResponse] = Field(default_factory=list)
    recent_timestamps: list[int] = Field(default_factory=list)


class StatsResponse(BaseModel):
    """Mirrors chatmod.moderation.stats.ModerationStats."""

    messages_sent: int = 0
    messages_blocked: int = 0
    messages_filtered: int = 0
    messages_moderated: int = 0
    messages_per_minute: float = 0.0
    by_reason: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Chat models
# ---------------------------------------------------------------------------


class SendMessageRequest(BaseModel):
    """Request body for sending a chat message."""

    sender_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    text: str
    now_ms: Optional[int] = None


class SendMessageResponse(BaseModel):
    """Outcome of a send attempt."""

    status: str
    notice: str = ""
    verdict: Optional[VerdictResponse] = None
    message: dict[str, Any] = Field(default_factory=dict)
