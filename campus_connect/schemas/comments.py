"""Request/response schemas for event comments."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from campus_connect.schemas.chat import as_utc


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    event_id: int = Field(
        ..., validation_alias=AliasChoices("eventId", "event_id", "EventId")
    )


class CommentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    content: str
    created_at: datetime = Field(..., serialization_alias="createdAt")
    username: str

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
