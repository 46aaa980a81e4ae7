"""ORM model for persisted chat messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from campus_connect.models.base import Base


class ChatMessage(Base):
    """
    One message sent through the chat hub. Immutable once written.

    sent_at is set by the hub (UTC) rather than the database so the broadcast
    payload and the stored row carry the same timestamp.
    """

    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User")
