"""SQLAlchemy ORM models."""

from campus_connect.models.base import Base
from campus_connect.models.chat_message import ChatMessage
from campus_connect.models.comment import Comment
from campus_connect.models.event import Event, EventTag, Tag
from campus_connect.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Base",
    "ChatMessage",
    "Comment",
    "Event",
    "EventTag",
    "ROLE_ADMIN",
    "ROLE_USER",
    "Tag",
    "User",
]
