"""Chat router -- send moderated messages to an in-memory channel."""

from __future__ import annotations

import os
from typing import Any

from fastapi import APIRouter, HTTPException, status

from chatmod.chat import InMemoryPublisher, MessageSender
from chatmod.moderation import ModerationInputError
from web.backend.app.models.api import SendMessageRequest, SendMessageResponse
from web.backend.app.routers.moderation import get_pipeline, get_stats, verdict_response

router = APIRouter(prefix="/api/chat", tags=["chat"])

CHANNEL = os.environ.get("CHATMOD_CHANNEL", "chatmod-demo")

_publisher: InMemoryPublisher | None = None


def get_publisher() -> InMemoryPublisher:
    global _publisher
    if _publisher is None:
        _publisher = InMemoryPublisher()
    return _publisher


def reset_publisher() -> None:
    global _publisher
    _publisher = None


@router.post(
    "/send",
    response_model=SendMessageResponse,
    summary="Moderate and publish a chat message",
)
async def send_message(body: SendMessageRequest):
    sender = MessageSender(get_pipeline(), get_publisher(), CHANNEL, stats=get_stats())
    try:
        result = await sender.send(body.sender_id, body.username, body.text, body.now_ms)
    except ModerationInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )

    if result.status == "empty":
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Message text is empty",
        )

    return SendMessageResponse(
        status=result.status,
        notice=result.notice,
        verdict=verdict_response(result.verdict) if result.verdict else None,
        message=result.message,
    )


@router.get(
    "/messages",
    response_model=list[dict[str, Any]],
    summary="List published messages",
)
async def list_messages():
    return get_publisher().messages(CHANNEL)
