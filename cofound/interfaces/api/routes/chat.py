"""Websocket handler for realtime chat."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from cofound.application.use_cases.messaging import (
    MessagingContext,
    connect_user,
    disconnect_user,
    mark_messages_seen,
    resolve_identity,
    send_message,
)
from cofound.domain.exceptions import DomainException, InvalidRequest
from cofound.infrastructure.realtime import EVENT_ERROR, EVENT_MESSAGE_FAILED, EVENT_PONG
from cofound.interfaces.api.dependencies import get_messaging_context
from cofound.schemas import (
    InvalidClientEvent,
    MessageSeenEvent,
    PingEvent,
    SendMessageEvent,
    parse_client_event,
)

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def chat_websocket(
    websocket: WebSocket,
    context: MessagingContext = Depends(get_messaging_context),
) -> None:
    """Websocket endpoint carrying the chat events of one identity."""

    user_id = websocket.query_params.get("userId")
    if not user_id:
        await websocket.close(code=1008)
        return

    try:
        user = await resolve_identity(context, user_id)
    except DomainException:
        await websocket.close(code=1008)
        return
    except Exception:  # pragma: no cover
        logger.exception("Failed to resolve chat identity %s", user_id)
        await websocket.close(code=1011)
        return

    await websocket.accept()
    try:
        await connect_user(context, user.id, websocket)
        while True:
            frame = await websocket.receive_text()
            await _dispatch(context, websocket, user.id, frame)
    except WebSocketDisconnect:
        pass
    finally:
        await disconnect_user(context, user.id, websocket)


async def _dispatch(
    context: MessagingContext, websocket: WebSocket, user_id: str, frame: str
) -> None:
    try:
        event = parse_client_event(frame)
    except InvalidClientEvent as exc:
        if exc.event_type == SendMessageEvent.event_type:
            # The client tracks its optimistic message by tempId.
            await context.emitter.emit(
                websocket,
                EVENT_MESSAGE_FAILED,
                {**exc.to_payload(), "tempId": exc.data.get("tempId")},
            )
        else:
            await context.emitter.emit(websocket, EVENT_ERROR, exc.to_payload())
        return
    except InvalidRequest as exc:
        await context.emitter.emit(websocket, EVENT_ERROR, exc.to_payload())
        return

    if isinstance(event, PingEvent):
        await context.emitter.emit(websocket, EVENT_PONG, {})
    elif isinstance(event, SendMessageEvent):
        await send_message(context, websocket, user_id, event)
    elif isinstance(event, MessageSeenEvent):
        await mark_messages_seen(context, websocket, user_id, event)
