"""Request/response schemas for events, tags and votes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campus_connect.schemas.chat import as_utc

MAX_TAGS_PER_EVENT = 20


class EventBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: str = Field(default="", max_length=10000)
    location: str = Field(default="", max_length=255)
    category: str = Field(default="", max_length=64)
    date: datetime
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS_PER_EVENT)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        """Strip, drop blanks and duplicates (case-insensitive), keep first spelling."""
        seen: set[str] = set()
        out: list[str] = []
        for raw in v:
            name = raw.strip()
            if not name or len(name) > 64 or name.lower() in seen:
                continue
            seen.add(name.lower())
            out.append(name)
        return out


class EventCreate(EventBase):
    """Body for POST /events. Title must be non-blank and date not in the past."""


class EventUpdate(EventBase):
    """Body for PUT /events/{id}. Replaces every field except votes."""


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    location: str
    category: str
    date: datetime
    votes: int
    tags: list[str]

    @field_validator("tags", mode="before")
    @classmethod
    def tag_names(cls, v: list) -> list[str]:
        return [t if isinstance(t, str) else t.name for t in v]

    @field_validator("date")
    @classmethod
    def date_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class VoteRequest(BaseModel):
    """vote=true adds one interested vote; vote=false removes one (never below zero)."""

    vote: bool


class VoteResponse(BaseModel):
    votes: int


class TagOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
