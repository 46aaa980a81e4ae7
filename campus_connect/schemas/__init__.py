"""Pydantic request/response schemas."""

from campus_connect.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
)
from campus_connect.schemas.chat import ChatMessageOut, HubInvocation
from campus_connect.schemas.comments import CommentCreate, CommentOut
from campus_connect.schemas.events import (
    EventCreate,
    EventOut,
    EventUpdate,
    TagOut,
    VoteRequest,
    VoteResponse,
)
from campus_connect.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "ChatMessageOut",
    "CommentCreate",
    "CommentOut",
    "CurrentUser",
    "EventCreate",
    "EventOut",
    "EventUpdate",
    "HealthResponse",
    "HubInvocation",
    "LoginRequest",
    "RegisterRequest",
    "TagOut",
    "VoteRequest",
    "VoteResponse",
]
