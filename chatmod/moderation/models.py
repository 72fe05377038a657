"""Data models for the moderation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ModerationInputError(ValueError):
    """Raised when a message cannot be evaluated at all (e.g. empty text)."""


class ReasonCode(Enum):
    """Why a verdict came out the way it did."""

    NONE = "none"
    DUPLICATE_EXACT = "duplicate_exact"
    DUPLICATE_SIMILAR = "duplicate_similar"
    RATE_LIMITED = "rate_limited"
    PROFANITY = "profanity"  # informational only, never blocks

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.NONE: "",
    ReasonCode.DUPLICATE_EXACT: "Duplicate message detected",
    ReasonCode.DUPLICATE_SIMILAR: "Duplicate message detected",
    ReasonCode.RATE_LIMITED: "Sending messages too quickly",
    ReasonCode.PROFANITY: "Profanity detected",
}


DEFAULT_BLOCKED_TERMS: tuple[str, ...] = ("spam", "badword", "inappropriate")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ModerationConfig:
    """Static moderation policy.

    Frozen; the pipeline swaps in a new instance when toggles or thresholds
    change.  Windows are in milliseconds.
    """

    blocked_terms: tuple[str, ...] = DEFAULT_BLOCKED_TERMS
    max_messages_per_window: int = 10
    rate_window_ms: int = 60_000
    exact_duplicate_window_ms: int = 5_000
    similar_duplicate_window_ms: int = 10_000
    similarity_threshold: float = 0.8
    caps_ratio_threshold: float = 0.6
    min_length_for_caps_check: int = 5
    history_size: int = 10
    profanity_filter_enabled: bool = True
    rate_limit_enabled: bool = True
    caps_normalization_enabled: bool = True

    def __post_init__(self) -> None:
        # Accept any iterable of terms but store an ordered tuple
        if isinstance(self.blocked_terms, str):
            raise ValueError("blocked_terms must be a list of terms, not a string")
        terms = tuple(t for t in self.blocked_terms if t)
        for term in terms:
            if not isinstance(term, str):
                raise ValueError(f"blocked_terms must contain strings, got {term!r}")
        object.__setattr__(self, "blocked_terms", terms)

        for name in ("profanity_filter_enabled", "rate_limit_enabled", "caps_normalization_enabled"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")

        for name in ("similarity_threshold", "caps_ratio_threshold"):
            value = getattr(self, name)
            if not _is_number(value):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value!r}")

        for name in (
            "max_messages_per_window",
            "rate_window_ms",
            "exact_duplicate_window_ms",
            "similar_duplicate_window_ms",
            "history_size",
            "min_length_for_caps_check",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if name != "min_length_for_caps_check" and value <= 0:
                raise ValueError(f"{name} must be positive, got {value!r}")

        if self.min_length_for_caps_check < 0:
            raise ValueError(
                f"min_length_for_caps_check must not be negative, got {self.min_length_for_caps_check!r}"
            )


@dataclass(frozen=True)
class MessageRecord:
    """One entry of a sender's duplicate-detection history."""

    text: str
    sent_at_ms: int


@dataclass
class SenderModerationState:
    """Accumulated moderation state for a single sender identity."""

    sender_id: str
    recent_messages: list[MessageRecord] = field(default_factory=list)
    recent_timestamps: list[int] = field(default_factory=list)

    @property
    def last_message(self) -> MessageRecord | None:
        return self.recent_messages[-1] if self.recent_messages else None

    def copy(self) -> SenderModerationState:
        return SenderModerationState(
            sender_id=self.sender_id,
            recent_messages=list(self.recent_messages),
            recent_timestamps=list(self.recent_timestamps),
        )


@dataclass(frozen=True)
class ModerationVerdict:
    """Outcome of evaluating one candidate message."""

    accepted: bool
    reason_code: ReasonCode = ReasonCode.NONE
    output_text: str = ""
    was_transformed: bool = False

    @property
    def reason(self) -> str:
        return self.reason_code.message

    @property
    def blocked_message(self) -> str:
        """User-facing text for a rejected message; empty when accepted."""
        if self.accepted:
            return ""
        return f"Message blocked: {self.reason}"
