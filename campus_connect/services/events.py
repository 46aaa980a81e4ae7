"""Event business rules: validation, filtering, search, tags and votes."""

import logging
from datetime import UTC, datetime

from sqlalchemy import case, func, or_, update
from sqlalchemy.orm import Session, selectinload

from campus_connect.core.errors import NotFoundError, ValidationFailedError
from campus_connect.models import Event, Tag
from campus_connect.schemas.chat import as_utc
from campus_connect.schemas.events import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


def _require_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationFailedError("Event title is required")
    return cleaned


def _resolve_tags(db: Session, names: list[str]) -> list[Tag]:
    """Return Tag rows for names, creating missing ones. Matching is case-insensitive."""
    if not names:
        return []
    lowered = [n.lower() for n in names]
    existing = db.query(Tag).filter(func.lower(Tag.name).in_(lowered)).all()
    by_name = {t.name.lower(): t for t in existing}
    tags: list[Tag] = []
    for name in names:
        tag = by_name.get(name.lower())
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
            by_name[name.lower()] = tag
        tags.append(tag)
    return tags


def _events_query(db: Session):
    return db.query(Event).options(selectinload(Event.tags)).order_by(Event.date, Event.id)


def list_events(db: Session) -> list[Event]:
    return _events_query(db).all()


def get_event(db: Session, event_id: int) -> Event:
    """Return the event or raise NotFoundError."""
    event = _events_query(db).filter(Event.id == event_id).first()
    if event is None:
        raise NotFoundError("Event not found")
    return event


def create_event(db: Session, body: EventCreate, now: datetime | None = None) -> Event:
    """
    Create an event. Title must be non-blank; date must not be in the past.
    Raises ValidationFailedError otherwise.
    """
    title = _require_title(body.title)
    date = as_utc(body.date)
    if date < (now or datetime.now(UTC)):
        raise ValidationFailedError("Event date must be in the future")

    event = Event(
        title=title,
        description=body.description,
        location=body.location,
        category=body.category.strip(),
        date=date,
        votes=0,
    )
    event.tags = _resolve_tags(db, body.tags)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Event created: id=%s title=%r", event.id, event.title)
    return event


def update_event(db: Session, event_id: int, body: EventUpdate) -> Event:
    """Replace an event's fields (votes are only changed through vote_event)."""
    event = get_event(db, event_id)
    event.title = _require_title(body.title)
    event.description = body.description
    event.location = body.location
    event.category = body.category.strip()
    event.date = as_utc(body.date)
    event.tags = _resolve_tags(db, body.tags)
    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, event_id: int) -> None:
    event = get_event(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Event deleted: id=%s", event_id)


def events_by_category(db: Session, category: str) -> list[Event]:
    """Case-insensitive exact match on category."""
    return (
        _events_query(db)
        .filter(func.lower(Event.category) == category.strip().lower())
        .all()
    )


def search_events(db: Session, term: str) -> list[Event]:
    """Case-insensitive substring match over title, description and location."""
    needle = term.strip().lower()
    if not needle:
        return list_events(db)
    return (
        _events_query(db)
        .filter(
            or_(
                func.lower(Event.title).contains(needle, autoescape=True),
                func.lower(Event.description).contains(needle, autoescape=True),
                func.lower(Event.location).contains(needle, autoescape=True),
            )
        )
        .all()
    )


def vote_event(db: Session, event_id: int, vote: bool) -> int:
    """
    Increment (vote=True) or decrement (vote=False, floor 0) the vote counter in
    a single UPDATE and return the new count. Votes are not tied to users, so the
    same user can vote repeatedly.
    """
    new_votes = Event.votes + 1 if vote else case((Event.votes > 0, Event.votes - 1), else_=0)
    result = db.execute(
        update(Event)
        .where(Event.id == event_id)
        .values(votes=new_votes)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Event not found")
    db.commit()
    votes = db.query(Event.votes).filter(Event.id == event_id).scalar()
    return int(votes or 0)


def list_tags(db: Session) -> list[Tag]:
    return db.query(Tag).order_by(Tag.name).all()
