"""API tests — routes wired to in-memory services via dependency overrides."""
import random
import uuid

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_event_service, get_matching_service
from app.main import app
from app.services.event_service import EventService
from app.services.matching_service import MatchingService


@pytest.fixture
def client(store):
    app.dependency_overrides[get_matching_service] = lambda: MatchingService(
        store=store, rng=random.Random(11)
    )
    app.dependency_overrides[get_event_service] = lambda: EventService(store=store)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _base(event):
    return f"/api/v1/events/{event.id}"


class TestMatchingEndpoints:

    def test_generate_returns_counts(self, client, event, make_participants):
        make_participants(5)

        response = client.post(f"{_base(event)}/matching")

        assert response.status_code == 201
        body = response.json()
        assert body["participant_count"] == 5
        assert body["created_matches"] == 2
        assert sorted(m["type"] for m in body["matches"]) == ["pair", "trio"]
        assert len(body["assignments"]) == 5

    def test_generate_with_one_participant(self, client, event, make_participants):
        make_participants(1)

        response = client.post(f"{_base(event)}/matching")

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_PARTICIPANTS"

    def test_generate_unknown_event(self, client):
        response = client.post(f"/api/v1/events/{uuid.uuid4()}/matching")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_generate_ended_event(self, client, store):
        ended = store.add_event(code="OVER", status="ended")
        response = client.post(f"/api/v1/events/{ended.id}/matching")
        assert response.status_code == 409
        assert response.json()["code"] == "EVENT_CLOSED"

    def test_generate_commit_failure(self, client, store, event, make_participants):
        make_participants(2)
        store.fail_next_commit = True

        response = client.post(f"{_base(event)}/matching")

        assert response.status_code == 503
        assert response.json()["code"] == "PERSISTENCE_FAILURE"

    def test_get_matching_empty_then_filled(self, client, event, make_participants):
        make_participants(4)

        empty = client.get(f"{_base(event)}/matching")
        assert empty.status_code == 200
        assert empty.json() == {"matches": [], "assignments": []}

        client.post(f"{_base(event)}/matching")
        filled = client.get(f"{_base(event)}/matching").json()
        assert len(filled["matches"]) == 2
        assert len(filled["assignments"]) == 4

    def test_my_target(self, client, store, event, make_participants):
        a, b = make_participants(2)
        store.add_hint(b, "H1", {"musicGenre": "k-pop"})
        store.add_hint(b, "H4", {"glasses": True})
        store.add_round(event.id, "Round 1", ["H1"], is_active=True)
        client.post(f"{_base(event)}/matching")

        response = client.get(f"{_base(event)}/my-target", params={"participant_id": str(a.id)})

        assert response.status_code == 200
        body = response.json()
        assert body["participant"]["id"] == str(a.id)
        assert body["assignment"]["target_id"] == str(b.id)
        assert body["target"]["id"] == str(b.id)
        assert [h["level"] for h in body["target"]["visible_hints"]] == ["H1"]
        assert body["active_round"] == "Round 1"

    def test_my_target_before_matching(self, client, event, make_participants):
        a, _ = make_participants(2)

        response = client.get(f"{_base(event)}/my-target", params={"participant_id": str(a.id)})

        assert response.status_code == 404
        assert response.json()["code"] == "NO_ASSIGNMENT"

    def test_my_target_requires_participant_id(self, client, event):
        response = client.get(f"{_base(event)}/my-target")
        assert response.status_code == 422

    def test_update_status_and_progress(self, client, event, make_participants):
        a, _ = make_participants(2)
        client.post(f"{_base(event)}/matching")

        response = client.put(
            f"{_base(event)}/match-status",
            json={"participant_id": str(a.id), "status": "completed"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["assignment"]["status"] == "completed"
        assert body["assignment"]["found_at"] is not None

        progress = client.get(f"{_base(event)}/matching/progress").json()
        assert progress["status_counts"]["completed"] == 1
        assert progress["matched_participants"] == 1
        assert progress["progress_percent"] == 50

    def test_update_status_invalid(self, client, event, make_participants):
        a, _ = make_participants(2)
        client.post(f"{_base(event)}/matching")

        response = client.put(
            f"{_base(event)}/match-status",
            json={"participant_id": str(a.id), "status": "abandoned"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS"


class TestEventEndpoints:

    def test_validate_code(self, client, event):
        response = client.get("/api/v1/events/validate", params={"code": "kople"})
        assert response.status_code == 200
        assert response.json() == {
            "event_id": str(event.id),
            "title": event.title,
            "status": "live",
        }

    def test_validate_unknown_code(self, client):
        response = client.get("/api/v1/events/validate", params={"code": "MISSING"})
        assert response.status_code == 404

    def test_event_details(self, client, event):
        response = client.get(_base(event))
        assert response.status_code == 200
        assert response.json()["code"] == "KOPLE"
        assert response.json()["matching_created"] is False

    def test_participants_and_rounds(self, client, store, event, make_participants):
        make_participants(3)
        store.add_round(event.id, "Second", ["H1", "H2"], order=2)
        store.add_round(event.id, "First", ["H1"], order=1, is_active=True)

        participants = client.get(f"{_base(event)}/participants").json()
        rounds = client.get(f"{_base(event)}/rounds").json()

        assert len(participants) == 3
        assert [r["name"] for r in rounds] == ["First", "Second"]


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
