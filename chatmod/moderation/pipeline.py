"""The moderation pipeline.

Each candidate message runs through an ordered, short-circuiting set of
checks against the sender's accumulated state:

1. duplicate check (always on): exact repeat within a short window, or a
   near-repeat (not identical) of the *last* message only, within a slightly
   longer window
2. profanity masking (toggle): never blocks, only rewrites
3. rate limit (toggle): rejects the (N+1)-th message inside the window
4. caps normalization (toggle): rewrites shouting text

Only messages that survive every blocking check are recorded.  History
stores what the sender typed, not the filtered output.
"""

from __future__ import annotations

import re
import threading
import time
from dataclasses import asdict, replace
from typing import Optional

from chatmod.log import get_logger
from chatmod.moderation.models import (
    MessageRecord,
    ModerationConfig,
    ModerationInputError,
    ModerationVerdict,
    ReasonCode,
    SenderModerationState,
)
from chatmod.moderation.similarity import similarity

logger = get_logger(__name__)

PROFANITY_MASK = "***"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ModerationPipeline:
    """Stateful moderator keyed by sender identity.

    Whether a sender id is global or per-channel is up to the caller; the
    pipeline never interprets it.
    """

    def __init__(self, config: ModerationConfig | None = None) -> None:
        self._config = config or ModerationConfig()
        self._states: dict[str, SenderModerationState] = {}
        self._lock = threading.Lock()
        self._term_patterns = self._compile_terms(self._config.blocked_terms)

    # -- configuration -------------------------------------------------------

    @property
    def config(self) -> ModerationConfig:
        return self._config

    def set_toggles(
        self,
        profanity_filter_enabled: Optional[bool] = None,
        rate_limit_enabled: Optional[bool] = None,
        caps_normalization_enabled: Optional[bool] = None,
    ) -> ModerationConfig:
        """Flip feature toggles; toggles passed as ``None`` are left alone."""
        changes = {
            name: value
            for name, value in (
                ("profanity_filter_enabled", profanity_filter_enabled),
                ("rate_limit_enabled", rate_limit_enabled),
                ("caps_normalization_enabled", caps_normalization_enabled),
            )
            if value is not None
        }
        return self.update_config(**changes)

    def update_config(self, **changes) -> ModerationConfig:
        """Replace config fields at runtime.  Raises ``ValueError`` on bad values."""
        if not changes:
            return self._config
        unknown = set(changes) - set(asdict(self._config))
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(sorted(unknown))}")

        with self._lock:
            new_config = replace(self._config, **changes)
            if new_config.blocked_terms != self._config.blocked_terms:
                self._term_patterns = self._compile_terms(new_config.blocked_terms)
            self._config = new_config

        logger.info("Moderation config updated: %s", changes)
        return new_config

    @staticmethod
    def _compile_terms(terms: tuple[str, ...]) -> list[tuple[str, re.Pattern[str]]]:
        return [(term, re.compile(re.escape(term), re.IGNORECASE)) for term in terms]

    # -- state access --------------------------------------------------------

    def get_state(self, sender_id: str) -> SenderModerationState | None:
        """Return a copy of *sender_id*'s state, or ``None`` if never seen."""
        with self._lock:
            state = self._states.get(sender_id)
            return state.copy() if state else None

    def senders(self) -> list[str]:
        with self._lock:
            return list(self._states)

    # -- evaluation ----------------------------------------------------------

    def evaluate(
        self, sender_id: str, text: str, now_ms: int | None = None
    ) -> ModerationVerdict:
        """Moderate *text* from *sender_id* and record it if accepted."""
        if not isinstance(text, str) or not text.strip():
            raise ModerationInputError("Message text must be a non-empty string")
        if now_ms is None:
            now_ms = _now_ms()

        with self._lock:
            config = self._config
            state = self._states.get(sender_id)
            if state is None:
                state = SenderModerationState(sender_id=sender_id)
                self._states[sender_id] = state

            # 1. Duplicates (always on); state left untouched on rejection
            duplicate = self._check_duplicate(state, text, now_ms, config)
            if duplicate is not None:
                logger.info("Rejected message from %s: %s", sender_id, duplicate.value)
                return ModerationVerdict(
                    accepted=False, reason_code=duplicate, output_text=text
                )

            working = text
            reason = ReasonCode.NONE

            # 2. Profanity: mask only
            if config.profanity_filter_enabled:
                masked = self._mask_profanity(working)
                if masked is not None:
                    working = masked
                    reason = ReasonCode.PROFANITY

            # 3. Rate limit; the current message is not counted yet
            window = self._timestamps_in_window(state, now_ms, config)
            if config.rate_limit_enabled and len(window) >= config.max_messages_per_window:
                logger.info(
                    "Rejected message from %s: rate limited (%d in %dms)",
                    sender_id,
                    len(window),
                    config.rate_window_ms,
                )
                return ModerationVerdict(
                    accepted=False, reason_code=ReasonCode.RATE_LIMITED, output_text=working
                )

            # 4. Caps; measured on the original text
            if config.caps_normalization_enabled and self._has_excessive_caps(text, config):
                working = working[:1].upper() + working[1:].lower()

            # 5. Commit
            state.recent_messages.append(MessageRecord(text=text, sent_at_ms=now_ms))
            if len(state.recent_messages) > config.history_size:
                del state.recent_messages[: len(state.recent_messages) - config.history_size]
            window.append(now_ms)
            state.recent_timestamps = window

        was_transformed = working != text
        if was_transformed:
            logger.debug("Message from %s was filtered", sender_id)
        return ModerationVerdict(
            accepted=True,
            reason_code=reason,
            output_text=working,
            was_transformed=was_transformed,
        )

    # -- checks --------------------------------------------------------------

    @staticmethod
    def _check_duplicate(
        state: SenderModerationState, text: str, now_ms: int, config: ModerationConfig
    ) -> ReasonCode | None:
        last = state.last_message
        if last is None:
            return None

        elapsed = now_ms - last.sent_at_ms
        if elapsed < config.exact_duplicate_window_ms and text == last.text:
            return ReasonCode.DUPLICATE_EXACT
        # Identical text is governed by the exact window alone
        if (
            text != last.text
            and elapsed < config.similar_duplicate_window_ms
            and similarity(text, last.text) > config.similarity_threshold
        ):
            return ReasonCode.DUPLICATE_SIMILAR
        return None

    def _mask_profanity(self, text: str) -> str | None:
        """Return *text* with every blocked term masked, or ``None`` if clean."""
        lowered = text.lower()
        if not any(term.lower() in lowered for term, _ in self._term_patterns):
            return None
        for _, pattern in self._term_patterns:
            text = pattern.sub(PROFANITY_MASK, text)
        return text

    @staticmethod
    def _timestamps_in_window(
        state: SenderModerationState, now_ms: int, config: ModerationConfig
    ) -> list[int]:
        # Read-only: returns a new list, the caller decides whether to store it
        cutoff = now_ms - config.rate_window_ms
        return [t for t in state.recent_timestamps if cutoff <= t <= now_ms]

    @staticmethod
    def _has_excessive_caps(text: str, config: ModerationConfig) -> bool:
        if len(text) < config.min_length_for_caps_check:
            return False
        caps = sum(1 for ch in text if "A" <= ch <= "Z")
        return caps / len(text) > config.caps_ratio_threshold
