"""SQLAlchemy message store against in-memory SQLite: history order, limits and save failures."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from campus_connect.core.database import SessionLocal
from campus_connect.core.errors import PersistenceError
from campus_connect.models import ChatMessage
from campus_connect.services.chat import SqlMessageStore, get_recent_messages
from tests.support import create_user, reset_schema


class TestSqlMessageStore(unittest.TestCase):
    def setUp(self) -> None:
        reset_schema()
        self.alice = create_user("alice")
        self.store = SqlMessageStore(SessionLocal)

    def test_recent_returns_newest_in_chronological_order(self) -> None:
        base = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        for i, text in enumerate(["A", "B", "C", "D"]):
            self.store.save(text, self.alice.id, base + timedelta(seconds=i))

        recent = self.store.recent(3)

        self.assertEqual([m.content for m in recent], ["B", "C", "D"])
        self.assertTrue(all(m.username == "alice" for m in recent))

    def test_ties_on_sent_at_fall_back_to_insert_order(self) -> None:
        same = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        for text in ("first", "second", "third"):
            self.store.save(text, self.alice.id, same)
        self.assertEqual([m.content for m in self.store.recent(2)], ["second", "third"])

    def test_save_returns_persisted_id(self) -> None:
        message_id = self.store.save("hello", self.alice.id, datetime.now(UTC))
        db = SessionLocal()
        try:
            row = db.get(ChatMessage, message_id)
            self.assertIsNotNone(row)
            self.assertEqual(row.content, "hello")
            self.assertEqual(row.user_id, self.alice.id)
        finally:
            db.close()

    def test_unknown_author_is_rejected(self) -> None:
        with self.assertRaises(PersistenceError):
            self.store.save("boo", 999, datetime.now(UTC))
        self.assertEqual(self.store.recent(10), [])

    def test_history_timestamps_are_utc(self) -> None:
        sent_at = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self.store.save("hello", self.alice.id, sent_at)
        self.assertEqual(self.store.recent(1)[0].sent_at, sent_at)
        self.assertEqual(self.store.recent(1)[0].sent_at.tzinfo, UTC)

    def test_non_positive_limit_returns_nothing(self) -> None:
        self.store.save("hello", self.alice.id, datetime.now(UTC))
        db = SessionLocal()
        try:
            self.assertEqual(get_recent_messages(db, 0), [])
        finally:
            db.close()


class TestSqlMessageStoreFailure(unittest.TestCase):
    """Commit failures surface as PersistenceError and roll back."""

    def test_commit_failure_raises_persistence_error(self) -> None:
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is down"))
        store = SqlMessageStore(lambda: session)

        with self.assertRaises(PersistenceError):
            store.save("hello", 1, datetime.now(UTC))

        session.rollback.assert_called_once()
        session.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
