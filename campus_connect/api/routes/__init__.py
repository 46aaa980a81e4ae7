"""REST routes."""

from fastapi import APIRouter

from campus_connect.api.routes import auth, chat, comments, events, health, tags

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])
router.include_router(comments.router, prefix="/comments", tags=["comments"])
router.include_router(chat.router, prefix="/chat", tags=["chat"])
