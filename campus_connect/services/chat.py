"""Chat message persistence: the store behind the hub and the history endpoint."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_connect.core.errors import PersistenceError
from campus_connect.models import ChatMessage, User
from campus_connect.schemas.chat import ChatMessageOut

logger = logging.getLogger(__name__)


def get_recent_messages(db: Session, limit: int) -> list[ChatMessageOut]:
    """
    Return the newest `limit` messages in chronological order (oldest first).

    Rows are read newest-first (ties broken by id) and then reversed.
    """
    if limit < 1:
        return []
    rows = (
        db.query(ChatMessage, User.username)
        .join(User, ChatMessage.user_id == User.id)
        .order_by(ChatMessage.sent_at.desc(), ChatMessage.id.desc())
        .limit(limit)
        .all()
    )
    messages = [
        ChatMessageOut(id=m.id, content=m.content, sent_at=m.sent_at, username=username)
        for m, username in rows
    ]
    messages.reverse()
    return messages


class MessageStore:
    """Interface the chat hub persists through. Methods are blocking."""

    def save(self, content: str, author_id: int, sent_at: datetime) -> int:
        """Durably store a message and return its id. Raise PersistenceError on failure."""
        raise NotImplementedError

    def recent(self, limit: int) -> list[ChatMessageOut]:
        raise NotImplementedError


class SqlMessageStore(MessageStore):
    """MessageStore backed by SQLAlchemy; one short-lived session per call."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def save(self, content: str, author_id: int, sent_at: datetime | None = None) -> int:
        db = self._session_factory()
        try:
            message = ChatMessage(
                content=content,
                user_id=author_id,
                sent_at=sent_at or datetime.now(UTC),
            )
            db.add(message)
            db.commit()
            logger.debug("Chat message persisted: id=%s author_id=%s", message.id, author_id)
            return message.id
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to persist chat message from author_id=%s", author_id)
            raise PersistenceError("Message could not be saved", cause=e) from e
        finally:
            db.close()

    def recent(self, limit: int) -> list[ChatMessageOut]:
        db = self._session_factory()
        try:
            return get_recent_messages(db, limit)
        except SQLAlchemyError as e:
            raise PersistenceError("Messages could not be loaded", cause=e) from e
        finally:
            db.close()
