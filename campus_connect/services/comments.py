"""Comments on events."""

from sqlalchemy.orm import Session

from campus_connect.core.errors import NotFoundError, ValidationFailedError
from campus_connect.models import Comment, Event, User
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.comments import CommentCreate, CommentOut


def list_comments(db: Session, event_id: int) -> list[CommentOut]:
    """Comments for an event, oldest first. An unknown event simply has none."""
    rows = (
        db.query(Comment, User.username)
        .join(User, Comment.user_id == User.id)
        .filter(Comment.event_id == event_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )
    return [
        CommentOut(id=c.id, content=c.content, created_at=c.created_at, username=username)
        for c, username in rows
    ]


def create_comment(db: Session, body: CommentCreate, author: CurrentUser) -> CommentOut:
    content = body.content.strip()
    if not content:
        raise ValidationFailedError("Comment content is required")
    exists = db.query(Event.id).filter(Event.id == body.event_id).first()
    if exists is None:
        raise NotFoundError("Event not found")

    comment = Comment(content=content, event_id=body.event_id, user_id=author.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return CommentOut(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        username=author.username,
    )
