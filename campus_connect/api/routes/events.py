"""Event CRUD, category filter, search and voting."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from campus_connect.api.routes.auth import get_current_user, require_admin
from campus_connect.core.database import get_db
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.events import (
    EventCreate,
    EventOut,
    EventUpdate,
    VoteRequest,
    VoteResponse,
)
from campus_connect.services import events as event_service

router = APIRouter()


@router.get("", response_model=list[EventOut])
def list_events(db: Annotated[Session, Depends(get_db)]) -> list[EventOut]:
    return [EventOut.model_validate(e) for e in event_service.list_events(db)]


@router.get("/category/{category}", response_model=list[EventOut])
def events_by_category(
    category: str,
    db: Annotated[Session, Depends(get_db)],
) -> list[EventOut]:
    """Events whose category equals `category`, ignoring case."""
    return [EventOut.model_validate(e) for e in event_service.events_by_category(db, category)]


@router.get("/search", response_model=list[EventOut])
def search_events(
    db: Annotated[Session, Depends(get_db)],
    term: Annotated[str, Query(max_length=255)] = "",
) -> list[EventOut]:
    """Case-insensitive substring search over title, description and location."""
    return [EventOut.model_validate(e) for e in event_service.search_events(db, term)]


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Annotated[Session, Depends(get_db)]) -> EventOut:
    return EventOut.model_validate(event_service.get_event(db, event_id))


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    body: EventCreate,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> EventOut:
    """Create an event (any logged-in user). Rejects blank titles and past dates."""
    event = event_service.create_event(db, body)
    response.headers["Location"] = str(request.url_for("get_event", event_id=event.id))
    return EventOut.model_validate(event)


@router.put("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_event(
    event_id: int,
    body: EventUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    event_service.update_event(db, event_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> Response:
    """Delete an event with its comments (Admin only)."""
    event_service.delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/vote", response_model=VoteResponse)
def vote_event(
    event_id: int,
    body: VoteRequest,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> VoteResponse:
    """vote=true increments, vote=false decrements (never below zero)."""
    return VoteResponse(votes=event_service.vote_event(db, event_id, body.vote))
