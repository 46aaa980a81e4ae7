"""ORM models for campus events and their tags."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from campus_connect.models.base import Base


class EventTag(Base):
    """Junction row linking one event to one tag."""

    __tablename__ = "event_tags"

    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True, index=True)

    events = relationship("Event", secondary="event_tags", back_populates="tags")


class Event(Base):
    """
    A campus event. votes is an anonymous counter kept at or above zero.

    Deleting an event removes its comments and tag links; tags themselves stay.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    category = Column(String(64), nullable=False, default="", index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    votes = Column(Integer, nullable=False, default=0)

    tags = relationship(
        "Tag",
        secondary="event_tags",
        back_populates="events",
        order_by="Tag.name",
    )
    comments = relationship(
        "Comment",
        back_populates="event",
        cascade="all, delete-orphan",
    )
