"""Moderation router -- evaluate messages, inspect sender state, flip toggles."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from chatmod.moderation import ModerationInputError, ModerationPipeline, ModerationVerdict
from chatmod.moderation.config import config_to_dict, resolve_config
from chatmod.moderation.stats import ModerationStats
from web.backend.app.models.api import (
    EvaluateRequest,
    ModerationConfigResponse,
    SenderStateResponse,
    StatsResponse,
    ToggleRequest,
    VerdictResponse,
)

router = APIRouter(prefix="/api/moderation", tags=["moderation"])


# ---------------------------------------------------------------------------
# Pipeline singletons
# ---------------------------------------------------------------------------

_pipeline: ModerationPipeline | None = None
_stats: ModerationStats | None = None


def get_pipeline() -> ModerationPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = ModerationPipeline(resolve_config())
    return _pipeline


def get_stats() -> ModerationStats:
    global _stats
    if _stats is None:
        _stats = ModerationStats()
    return _stats


def reset_state() -> None:
    """Drop the pipeline and stats; the next request builds fresh ones."""
    global _pipeline, _stats
    _pipeline = None
    _stats = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def verdict_response(verdict: ModerationVerdict) -> VerdictResponse:
    """Convert a ModerationVerdict to a VerdictResponse."""
    return VerdictResponse(
        accepted=verdict.accepted,
        reason_code=verdict.reason_code.value,
        reason=verdict.reason,
        output_text=verdict.output_text,
        was_transformed=verdict.was_transformed,
    )


def _config_response() -> ModerationConfigResponse:
    return ModerationConfigResponse(**config_to_dict(get_pipeline().config))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/evaluate",
    response_model=VerdictResponse,
    summary="Evaluate a message without publishing it",
)
async def evaluate_message(body: EvaluateRequest):
    """Run one message through the pipeline and record it if accepted."""
    try:
        verdict = get_pipeline().evaluate(body.sender_id, body.text, body.now_ms)
    except ModerationInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
    get_stats().record_verdict(verdict)
    return verdict_response(verdict)


@router.get(
    "/config",
    response_model=ModerationConfigResponse,
    summary="Get the effective moderation config",
)
async def get_config():
    return _config_response()


@router.put(
    "/toggles",
    response_model=ModerationConfigResponse,
    summary="Enable or disable moderation features",
)
async def update_toggles(body: ToggleRequest):
    """Flip the profanity, rate-limit and caps toggles.  Omitted fields are unchanged."""
    get_pipeline().set_toggles(
        profanity_filter_enabled=body.profanity_filter_enabled,
        rate_limit_enabled=body.rate_limit_enabled,
        caps_normalization_enabled=body.caps_normalization_enabled,
    )
    return _config_response()


@router.get(
    "/senders/{sender_id}",
    response_model=SenderStateResponse,
    summary="Get a sender's moderation state",
)
async def get_sender_state(sender_id: str):
    state = get_pipeline().get_state(sender_id)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No moderation state for sender '{sender_id}'",
        )
    return SenderStateResponse(**asdict(state))


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Get moderation analytics",
)
async def get_moderation_stats():
    return StatsResponse(**get_stats().to_dict())
