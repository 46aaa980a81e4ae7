"""Chat history endpoint and the realtime hub WebSocket."""

import asyncio
import logging
from contextlib import suppress
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, WebSocket, WebSocketDisconnect, status

from campus_connect.api.routes.auth import get_current_user
from campus_connect.core.config import settings
from campus_connect.core.errors import InvalidTokenError
from campus_connect.core.security import validate_access_token
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.chat import ChatMessageOut
from campus_connect.services.chat_hub import ChatHub, completion_frame

logger = logging.getLogger(__name__)

router = APIRouter()


def get_chat_hub(request: Request) -> ChatHub:
    """Dependency: the hub owned by the running application."""
    return request.app.state.chat_hub


def clamp_history_count(count: int | None) -> int:
    """Default missing counts and clamp the rest to 1..CHAT_HISTORY_MAX_COUNT."""
    if count is None:
        return settings.CHAT_HISTORY_DEFAULT_COUNT
    return max(1, min(count, settings.CHAT_HISTORY_MAX_COUNT))


@router.get("/messages", response_model=list[ChatMessageOut])
async def get_messages(
    hub: Annotated[ChatHub, Depends(get_chat_hub)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    count: Annotated[int | None, Query()] = None,
) -> list[ChatMessageOut]:
    """
    Most recent chat messages, oldest first. Clients call this once on connect to
    backfill history, then follow the hub for new messages.
    """
    return await hub.get_recent_messages(clamp_history_count(count))


def extract_token(authorization: str | None, access_token: str | None) -> str | None:
    """
    Pick the credential for a hub handshake: Authorization: Bearer header first,
    then the access_token query parameter (browsers cannot set headers on a
    WebSocket upgrade).
    """
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    if access_token and access_token.strip():
        return access_token.strip()
    return None


async def chat_hub_endpoint(websocket: WebSocket, access_token: str | None = None) -> None:
    """
    Hub connection lifecycle: authenticate, register, relay frames, unregister.

    A bad or missing token closes the socket before it is accepted, so the client
    sees a failed handshake rather than an application message.
    """
    hub: ChatHub = websocket.app.state.chat_hub
    token = extract_token(websocket.headers.get("authorization"), access_token)
    try:
        identity = validate_access_token(token)
    except InvalidTokenError as e:
        logger.info("Hub connection rejected: %s (expired=%s)", e.message, e.expired)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    await websocket.accept()
    connection = hub.connect(websocket, identity)
    await hub.register(connection)
    writer = asyncio.create_task(connection.pump())
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            raw = message.get("text")
            if raw is None:
                connection.enqueue(completion_frame(None, error="Binary frames are not supported"))
                continue
            await hub.dispatch(connection, raw)
    except WebSocketDisconnect as e:
        logger.debug("Hub client %s disconnected (code=%s)", connection.id, e.code)
    finally:
        await hub.unregister(connection)
        writer.cancel()
        with suppress(asyncio.CancelledError):
            await writer
