"""Test package. Point the app at an in-memory SQLite database before anything imports it."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-campus-connect"
os.environ.setdefault("LOG_LEVEL", "WARNING")
