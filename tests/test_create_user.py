"""CLI: python -m campus_connect.scripts.create_user."""

import unittest
from contextlib import redirect_stderr
from io import StringIO

from campus_connect.core.database import SessionLocal
from campus_connect.core.security import verify_password
from campus_connect.models import User
from campus_connect.scripts.create_user import main
from tests.support import create_user, reset_schema


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        reset_schema()

    def test_creates_admin(self) -> None:
        self.assertEqual(main(["root", "Root@Campus.edu", "admin-password", "Admin"]), 0)
        db = SessionLocal()
        try:
            user = db.query(User).filter(User.username == "root").one()
            self.assertEqual(user.role, "Admin")
            self.assertEqual(user.email, "root@campus.edu")
            self.assertTrue(verify_password("admin-password", user.password_hash))
        finally:
            db.close()

    def test_rejects_duplicates_and_short_passwords(self) -> None:
        create_user("alice")
        for argv in (
            ["alice", "other@campus.edu", "long-enough-pw"],
            ["carol", "alice@campus.edu", "long-enough-pw"],
            ["dave", "dave@campus.edu", "short"],
            ["erin", "not-an-email", "long-enough-pw"],
        ):
            with self.subTest(argv=argv):
                with redirect_stderr(StringIO()):
                    self.assertEqual(main(argv), 1)


if __name__ == "__main__":
    unittest.main()
