"""Events, tags, votes and comments over the REST surface."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from campus_connect.main import app
from tests.support import auth_header, create_user, reset_schema


def _future(days: int = 7) -> str:
    return (datetime.now(UTC) + timedelta(days=days)).isoformat()


def _event(**overrides: object) -> dict:
    body = {
        "title": "Hackathon",
        "description": "24h coding marathon",
        "location": "Building 315",
        "category": "Workshop",
        "date": _future(),
        "tags": ["coding", "prizes"],
    }
    body.update(overrides)
    return body


class EventsApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        reset_schema()
        self.client = TestClient(app)
        self.user = create_user("alice")
        self.admin = create_user("root", role="Admin")

    def create(self, **overrides: object) -> dict:
        resp = self.client.post("/api/events", json=_event(**overrides), headers=auth_header(self.user))
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()


class TestEventCrud(EventsApiTestCase):
    def test_create_requires_auth(self) -> None:
        resp = self.client.post("/api/events", json=_event())
        self.assertEqual(resp.status_code, 401)

    def test_create_then_get(self) -> None:
        created = self.create()
        self.assertEqual(created["votes"], 0)
        self.assertEqual(created["tags"], ["coding", "prizes"])

        resp = self.client.get(f"/api/events/{created['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "Hackathon")

    def test_past_date_is_rejected(self) -> None:
        resp = self.client.post(
            "/api/events",
            json=_event(date=(datetime.now(UTC) - timedelta(days=1)).isoformat()),
            headers=auth_header(self.user),
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.text, "Event date must be in the future")

    def test_blank_title_is_rejected(self) -> None:
        resp = self.client.post("/api/events", json=_event(title="   "), headers=auth_header(self.user))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.text, "Event title is required")

    def test_get_missing_event_is_404(self) -> None:
        resp = self.client.get("/api/events/999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.text, "Event not found")

    def test_update_replaces_fields_and_tags(self) -> None:
        created = self.create()
        resp = self.client.put(
            f"/api/events/{created['id']}",
            json=_event(title="Hackathon 2", tags=["Coding", "food"]),
            headers=auth_header(self.user),
        )
        self.assertEqual(resp.status_code, 204)
        event = self.client.get(f"/api/events/{created['id']}").json()
        self.assertEqual(event["title"], "Hackathon 2")
        self.assertEqual(sorted(event["tags"]), ["coding", "food"])

    def test_update_missing_event_is_404(self) -> None:
        resp = self.client.put("/api/events/999", json=_event(), headers=auth_header(self.user))
        self.assertEqual(resp.status_code, 404)

    def test_delete_requires_admin(self) -> None:
        created = self.create()
        resp = self.client.delete(f"/api/events/{created['id']}", headers=auth_header(self.user))
        self.assertEqual(resp.status_code, 403)

        resp = self.client.delete(f"/api/events/{created['id']}", headers=auth_header(self.admin))
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(self.client.get(f"/api/events/{created['id']}").status_code, 404)

    def test_delete_removes_comments(self) -> None:
        created = self.create()
        self.client.post(
            "/api/comments",
            json={"content": "see you there", "eventId": created["id"]},
            headers=auth_header(self.user),
        )
        self.client.delete(f"/api/events/{created['id']}", headers=auth_header(self.admin))
        self.assertEqual(self.client.get(f"/api/comments/event/{created['id']}").json(), [])


class TestEventQueries(EventsApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create(title="Jazz Night", category="Music", location="Main Hall", tags=[])
        self.create(title="Python Workshop", category="workshop", description="Intro to FastAPI")
        self.create(title="Career Fair", category="Career", location="Sports Hall")

    def test_list_returns_all(self) -> None:
        self.assertEqual(len(self.client.get("/api/events").json()), 3)

    def test_category_filter_ignores_case(self) -> None:
        resp = self.client.get("/api/events/category/WORKSHOP")
        self.assertEqual([e["title"] for e in resp.json()], ["Python Workshop"])

    def titles(self, term: str) -> list[str]:
        resp = self.client.get("/api/events/search", params={"term": term})
        return sorted(e["title"] for e in resp.json())

    def test_search_matches_title_description_and_location(self) -> None:
        self.assertEqual(self.titles("jazz"), ["Jazz Night"])
        self.assertEqual(self.titles("fastapi"), ["Python Workshop"])
        self.assertEqual(self.titles("hall"), ["Career Fair", "Jazz Night"])
        self.assertEqual(self.titles("%"), [])

    def test_tags_are_listed_once(self) -> None:
        tags = self.client.get("/api/tags").json()
        self.assertEqual(set(tags[0]), {"id", "name"})
        names = [t["name"] for t in tags]
        self.assertEqual(names, ["coding", "prizes"])


class TestVotes(EventsApiTestCase):
    def test_vote_increments_and_decrements_with_floor(self) -> None:
        event_id = self.create()["id"]
        url = f"/api/events/{event_id}/vote"
        headers = auth_header(self.user)

        self.assertEqual(self.client.post(url, json={"vote": True}, headers=headers).json(), {"votes": 1})
        self.assertEqual(self.client.post(url, json={"vote": True}, headers=headers).json(), {"votes": 2})
        self.assertEqual(self.client.post(url, json={"vote": False}, headers=headers).json(), {"votes": 1})
        self.assertEqual(self.client.post(url, json={"vote": False}, headers=headers).json(), {"votes": 0})
        self.assertEqual(self.client.post(url, json={"vote": False}, headers=headers).json(), {"votes": 0})

    def test_vote_requires_auth_and_existing_event(self) -> None:
        self.assertEqual(self.client.post("/api/events/1/vote", json={"vote": True}).status_code, 401)
        resp = self.client.post("/api/events/999/vote", json={"vote": True}, headers=auth_header(self.user))
        self.assertEqual(resp.status_code, 404)


class TestComments(EventsApiTestCase):
    def test_create_and_list_comments(self) -> None:
        event_id = self.create()["id"]
        for text in ("first!", "second"):
            resp = self.client.post(
                "/api/comments",
                json={"content": text, "eventId": event_id},
                headers=auth_header(self.user),
            )
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["username"], "alice")
            self.assertIn("createdAt", resp.json())

        comments = self.client.get(f"/api/comments/event/{event_id}").json()
        self.assertEqual([c["content"] for c in comments], ["first!", "second"])

    def test_comment_on_missing_event_is_404(self) -> None:
        resp = self.client.post(
            "/api/comments",
            json={"content": "hello", "eventId": 999},
            headers=auth_header(self.user),
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.text, "Event not found")

    def test_comment_requires_auth(self) -> None:
        event_id = self.create()["id"]
        resp = self.client.post("/api/comments", json={"content": "hi", "eventId": event_id})
        self.assertEqual(resp.status_code, 401)


if __name__ == "__main__":
    unittest.main()
