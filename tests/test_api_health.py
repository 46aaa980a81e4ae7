"""Health endpoint."""

import unittest

from fastapi.testclient import TestClient

from campus_connect.main import app
from tests.support import reset_schema


class TestHealth(unittest.TestCase):
    def setUp(self) -> None:
        reset_schema()

    def test_reports_database_and_connections(self) -> None:
        resp = TestClient(app).get("/api/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["connections"], 0)


if __name__ == "__main__":
    unittest.main()
