"""Shared fixtures for tests: schema setup, users, tokens and hub fakes."""

import asyncio
import threading
import time
from datetime import datetime
from typing import Any

from campus_connect.core.database import SessionLocal, engine
from campus_connect.core.errors import PersistenceError
from campus_connect.core.security import create_access_token, hash_password
from campus_connect.models import Base, User
from campus_connect.schemas.auth import CurrentUser
from campus_connect.schemas.chat import ChatMessageOut
from campus_connect.services.chat import MessageStore

# Pre-computed once; bcrypt is deliberately slow.
PASSWORD = "correct-horse-battery"
PASSWORD_HASH = hash_password(PASSWORD)


def reset_schema() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def create_user(username: str, role: str = "User", email: str | None = None) -> User:
    db = SessionLocal()
    try:
        user = User(
            username=username,
            email=email or f"{username}@campus.edu",
            password_hash=PASSWORD_HASH,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
        return user
    finally:
        db.close()


def token_for(user: User) -> str:
    return create_access_token(user)


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


def identity(user_id: int, username: str, role: str = "User") -> CurrentUser:
    return CurrentUser(id=user_id, username=username, email=f"{username}@campus.edu", role=role)


def wait_for(predicate, timeout: float = 2.0) -> None:
    """Poll until predicate() is true (the app runs on another thread under TestClient)."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        time.sleep(0.01)


async def settle(rounds: int = 5) -> None:
    """Let writer tasks drain their outboxes."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeWebSocket:
    """Records frames the hub writes."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.closed_with: int | None = None

    async def send_json(self, data: Any) -> None:
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = code

    def received(self, target: str = "ReceiveMessage") -> list[dict[str, Any]]:
        return [f["arguments"][0] for f in self.sent if f.get("target") == target]


class InMemoryMessageStore(MessageStore):
    """Thread-safe list-backed store; set fail=True to simulate an unreachable database."""

    def __init__(self, usernames: dict[int, str] | None = None, fail: bool = False) -> None:
        self.usernames = usernames or {}
        self.fail = fail
        self.rows: list[tuple[int, str, int, datetime]] = []
        self._lock = threading.Lock()

    def save(self, content: str, author_id: int, sent_at: datetime) -> int:
        if self.fail:
            raise PersistenceError("Message could not be saved")
        with self._lock:
            message_id = len(self.rows) + 1
            self.rows.append((message_id, content, author_id, sent_at))
            return message_id

    def recent(self, limit: int) -> list[ChatMessageOut]:
        with self._lock:
            newest = sorted(self.rows, key=lambda r: (r[3], r[0]), reverse=True)[:limit]
        return [
            ChatMessageOut(
                id=r[0],
                content=r[1],
                sent_at=r[3],
                username=self.usernames.get(r[2], "unknown"),
            )
            for r in reversed(newest)
        ]
