"""Event comments: list by event, create (logged-in users)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campus_connect.api.routes.auth import get_current_user
from campus_connect.core.database import get_db
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.comments import CommentCreate, CommentOut
from campus_connect.services.comments import create_comment, list_comments

router = APIRouter()


@router.get("/event/{event_id}", response_model=list[CommentOut])
def get_comments_by_event(
    event_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> list[CommentOut]:
    return list_comments(db, event_id)


@router.post("", response_model=CommentOut)
def post_comment(
    body: CommentCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CommentOut:
    return create_comment(db, body, user)
