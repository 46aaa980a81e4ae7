"""Schemas for chat history and realtime payloads."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (as SQLite returns them) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class ChatMessageOut(BaseModel):
    """A chat message as sent to clients, over REST and over the hub."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    content: str
    sent_at: datetime = Field(..., serialization_alias="sentAt")
    username: str

    @field_validator("sent_at")
    @classmethod
    def sent_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class HubInvocation(BaseModel):
    """Inbound hub frame: {"target": "SendMessage", "arguments": ["hi"], "invocationId": "1"}."""

    model_config = ConfigDict(populate_by_name=True)

    target: str = Field(..., min_length=1, max_length=64)
    arguments: list = Field(default_factory=list)
    invocation_id: str | None = Field(default=None, alias="invocationId", max_length=64)
