"""
Realtime chat hub: authenticated WebSocket connections, message persistence and fan-out.

Each open connection owns a bounded outbox drained by its own writer task, so a
slow client never delays delivery to anyone else. The live-connection registry is
private to ChatHub and only changes through register/unregister.

Wire format (JSON text frames):
  client -> hub   {"target": "SendMessage", "arguments": ["hi"], "invocationId": "1"}
  hub -> clients  {"type": "invocation", "target": "ReceiveMessage", "arguments": [{id, content, sentAt, username}]}
  hub -> sender   {"type": "completion", "invocationId": "1"}            (success, only if an id was sent)
                  {"type": "completion", "invocationId": "1", "error": "..."}
"""

import asyncio
import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Protocol

from fastapi import WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from campus_connect.core.errors import (
    AuthenticationError,
    CampusConnectError,
    ValidationFailedError,
)
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.chat import ChatMessageOut, HubInvocation
from campus_connect.services.chat import MessageStore

logger = logging.getLogger(__name__)

SEND_MESSAGE = "SendMessage"
RECEIVE_MESSAGE = "ReceiveMessage"

# Close codes sent by the hub (RFC 6455 / IANA registry).
CLOSE_GOING_AWAY = 1001
CLOSE_TRY_AGAIN_LATER = 1013

DEFAULT_HISTORY_COUNT = 50


class FrameSink(Protocol):
    """The part of a WebSocket the hub writes to."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


def receive_message_frame(message: ChatMessageOut) -> dict[str, Any]:
    return {
        "type": "invocation",
        "target": RECEIVE_MESSAGE,
        "arguments": [message.model_dump(mode="json", by_alias=True)],
    }


def completion_frame(invocation_id: str | None, error: str | None = None) -> dict[str, Any]:
    frame: dict[str, Any] = {"type": "completion", "invocationId": invocation_id}
    if error is not None:
        frame["error"] = error
    return frame


class Connection:
    """
    One hub connection: an identity fixed at open time plus an outbound queue.

    enqueue() never blocks; pump() is the only coroutine that writes to the socket.
    """

    def __init__(
        self,
        websocket: FrameSink,
        identity: CurrentUser | None,
        outbox_size: int = 256,
        connection_id: str | None = None,
    ) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.identity = identity
        self._websocket = websocket
        self._outbox: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=outbox_size)
        self._closed = False
        self._close_code: int | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def enqueue(self, frame: dict[str, Any]) -> bool:
        """Queue a frame for delivery. False if closed or the outbox is full."""
        if self._closed:
            return False
        try:
            self._outbox.put_nowait(frame)
        except asyncio.QueueFull:
            return False
        return True

    def close(self, code: int | None = None) -> None:
        """
        Stop accepting frames and release the writer. Pending frames are dropped.
        With a code, the writer also closes the socket (server-initiated close).
        Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True
        self._close_code = code
        while not self._outbox.empty():
            self._outbox.get_nowait()
        self._outbox.put_nowait(None)

    async def pump(self) -> None:
        """Write queued frames to the socket in order until the connection closes."""
        while True:
            frame = await self._outbox.get()
            if frame is None:
                break
            try:
                await self._websocket.send_json(frame)
            except (WebSocketDisconnect, RuntimeError, OSError) as e:
                # Transport already gone; the receive loop will unregister us.
                logger.debug("Send failed on connection %s: %s", self.id, e)
                self._closed = True
                return
        if self._close_code is not None:
            try:
                await self._websocket.close(code=self._close_code)
            except (RuntimeError, OSError) as e:
                logger.debug("Close failed on connection %s: %s", self.id, e)


class ChatHub:
    """Owns the live-connection registry and the send/broadcast path."""

    def __init__(
        self,
        store: MessageStore,
        max_message_length: int = 2000,
        outbox_size: int = 256,
    ) -> None:
        self._store = store
        self.max_message_length = max_message_length
        self.outbox_size = outbox_size
        self._connections: dict[str, Connection] = {}
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def connect(self, websocket: FrameSink, identity: CurrentUser) -> Connection:
        """Build a Connection for an authenticated socket (not yet registered)."""
        return Connection(websocket, identity, outbox_size=self.outbox_size)

    async def register(self, connection: Connection) -> None:
        async with self._lock:
            self._connections[connection.id] = connection
        logger.info(
            "Hub connection opened: id=%s user=%s (open=%s)",
            connection.id,
            connection.identity.username if connection.identity else None,
            len(self._connections),
        )

    async def unregister(self, connection: Connection) -> bool:
        """Remove and close a connection. Returns False if it was not registered."""
        async with self._lock:
            removed = self._connections.pop(connection.id, None)
        connection.close()
        if removed is None:
            return False
        logger.info(
            "Hub connection closed: id=%s (open=%s)", connection.id, len(self._connections)
        )
        return True

    async def broadcast(self, frame: dict[str, Any]) -> int:
        """
        Queue frame on every open connection; returns how many accepted it.
        A connection whose outbox is full is dropped and closed.
        """
        async with self._lock:
            targets = list(self._connections.values())
        delivered = 0
        overflowed: list[Connection] = []
        for connection in targets:
            if connection.enqueue(frame):
                delivered += 1
            elif not connection.closed:
                overflowed.append(connection)
        for connection in overflowed:
            logger.warning("Hub connection %s outbox full; disconnecting", connection.id)
            async with self._lock:
                self._connections.pop(connection.id, None)
            connection.close(code=CLOSE_TRY_AGAIN_LATER)
        return delivered

    async def send_message(self, connection: Connection, content: Any) -> ChatMessageOut:
        """
        Persist a message from connection's user, then broadcast it to every open
        connection. Nothing is broadcast unless the save committed; a failed save
        raises PersistenceError to the caller.
        """
        identity = connection.identity
        if identity is None:
            raise AuthenticationError("You must be logged in to send messages.")
        if connection.closed:
            raise AuthenticationError("Connection is closed.")
        if not isinstance(content, str) or not content.strip():
            raise ValidationFailedError("Message content is required")
        if len(content) > self.max_message_length:
            raise ValidationFailedError(
                f"Message must be at most {self.max_message_length} characters"
            )

        sent_at = datetime.now(UTC)
        message_id = await run_in_threadpool(self._store.save, content, identity.id, sent_at)
        message = ChatMessageOut(
            id=message_id,
            content=content,
            sent_at=sent_at,
            username=identity.username,
        )
        delivered = await self.broadcast(receive_message_frame(message))
        logger.debug("Message %s broadcast to %s connections", message_id, delivered)
        return message

    async def get_recent_messages(self, limit: int = DEFAULT_HISTORY_COUNT) -> list[ChatMessageOut]:
        """Most recent `limit` messages, oldest first."""
        return await run_in_threadpool(self._store.recent, limit)

    async def dispatch(self, connection: Connection, raw: str) -> None:
        """Handle one inbound frame. Errors go back to the sender only."""
        try:
            invocation = HubInvocation.model_validate_json(raw)
        except ValidationError:
            connection.enqueue(completion_frame(None, error="Malformed hub message"))
            return

        if invocation.target != SEND_MESSAGE:
            connection.enqueue(
                completion_frame(
                    invocation.invocation_id,
                    error=f"Unknown hub method '{invocation.target}'",
                )
            )
            return
        if len(invocation.arguments) != 1:
            connection.enqueue(
                completion_frame(
                    invocation.invocation_id,
                    error=f"{SEND_MESSAGE} expects exactly one argument",
                )
            )
            return

        try:
            await self.send_message(connection, invocation.arguments[0])
        except CampusConnectError as e:
            logger.info("%s rejected on connection %s: %s", SEND_MESSAGE, connection.id, e.message)
            connection.enqueue(completion_frame(invocation.invocation_id, error=e.message))
            return
        if invocation.invocation_id is not None:
            connection.enqueue(completion_frame(invocation.invocation_id))

    async def close_all(self) -> None:
        """Close every connection (server shutdown)."""
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()
        for connection in connections:
            connection.close(code=CLOSE_GOING_AWAY)
        if connections:
            logger.info("Hub shut down; closed %s connections", len(connections))
