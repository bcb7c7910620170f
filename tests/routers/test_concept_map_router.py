"""
API Tests for Concept Map Routes
================================

The session registry is replaced through FastAPI dependency overrides so
requests never reach an LLM.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from models.messages import Messages
from routers.concept_map import get_session_manager
from services.concept_map_session import SessionManager
from services.error_handler import LLMRateLimitError

BASE = "/api/concept_map"

WATER_CYCLE_REQUEST = {
    "topic": "Water Cycle",
    "education_level": "primary",
    "grade": 4,
    "depth_profile": "standard",
    "language": "en",
}


@pytest.fixture
def collaborators(make_generator, make_expander):
    return {"generator": make_generator(), "expander": make_expander()}


@pytest.fixture
def manager(collaborators):
    return SessionManager(
        generator_factory=lambda model: collaborators["generator"],
        expander_factory=lambda model: collaborators["expander"],
    )


@pytest.fixture
def client(manager):
    app.dependency_overrides[get_session_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client):
    response = client.post(f"{BASE}/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestSessions:
    """Session lifecycle endpoints."""

    def test_create_session(self, client, manager):
        response = client.post(f"{BASE}/sessions")

        assert response.status_code == 201
        body = response.json()
        assert body["max_expansions"] >= 0
        assert manager.count() == 1

    def test_get_empty_session(self, client, session_id):
        response = client.get(f"{BASE}/sessions/{session_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["nodes"] == []
        assert body["topic"] is None
        assert body["can_expand"] is False

    def test_unknown_session(self, client):
        response = client.get(f"{BASE}/sessions/missing", headers={"X-Language": "es"})

        assert response.status_code == 404
        assert response.json()["detail"] == Messages.error("session_not_found", "es", "missing")

    def test_delete_session(self, client, session_id, manager):
        response = client.delete(f"{BASE}/sessions/{session_id}")

        assert response.status_code == 200
        assert manager.count() == 0
        assert client.delete(f"{BASE}/sessions/{session_id}").status_code == 404


class TestGenerate:
    """POST /sessions/{id}/generate"""

    def test_generate(self, client, session_id, collaborators):
        response = client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "ok"
        assert body["topic"] == "Water Cycle"
        assert len(body["nodes"]) == 10
        assert len(body["edges"]) == 9
        assert body["stats"]["total"] == 10
        assert body["recommended_dimensions"]["width"] > 0
        assert body["can_expand"] is True
        assert collaborators["generator"].calls[0]["grade"] == 4

    def test_language_is_detected_from_topic(self, client, session_id, collaborators):
        response = client.post(f"{BASE}/sessions/{session_id}/generate", json={"topic": "El ciclo del agua"})

        assert response.status_code == 200
        assert collaborators["generator"].calls[0]["language"] == "es"
        assert response.json()["message"] == Messages.success("concept_map_generated", "es", 10)

    def test_aliases_are_accepted(self, client, session_id, collaborators):
        request = dict(WATER_CYCLE_REQUEST, education_level="primaria", depth_profile="basico")
        response = client.post(f"{BASE}/sessions/{session_id}/generate", json=request)

        assert response.status_code == 200
        assert collaborators["generator"].calls[0]["depth_profile"].value == "shallow"
        assert len(response.json()["nodes"]) == 4

    @pytest.mark.parametrize("overrides", [
        {"topic": "   "},
        {"grade": 6, "education_level": "secondary"},
        {"grade": 1, "education_level": "initial"},
        {"depth_profile": "extreme"},
    ])
    def test_invalid_request(self, client, session_id, overrides):
        request = dict(WATER_CYCLE_REQUEST, **overrides)
        response = client.post(f"{BASE}/sessions/{session_id}/generate", json=request)

        assert response.status_code == 422

    def test_collaborator_failure(self, client, session_id, collaborators):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)
        collaborators["generator"].error = LLMRateLimitError("slow down")

        response = client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["status"] == "failed"
        assert body["message"] == Messages.error("llm_rate_limited", "en")
        assert len(body["nodes"]) == 10

    def test_regenerate(self, client, session_id, collaborators):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        response = client.post(f"{BASE}/sessions/{session_id}/regenerate")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert len(collaborators["generator"].calls) == 2

    def test_regenerate_without_request(self, client, session_id):
        assert client.post(f"{BASE}/sessions/{session_id}/regenerate").status_code == 400


class TestExpand:
    """POST /sessions/{id}/expand"""

    def test_expand(self, client, session_id):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        response = client.post(f"{BASE}/sessions/{session_id}/expand")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["expansion_count"] == 1
        assert len(body["nodes"]) == 18
        assert body["stats"]["expansion-detail"] == 8

    def test_expand_without_map(self, client, session_id):
        assert client.post(f"{BASE}/sessions/{session_id}/expand").status_code == 400

    def test_expand_deep_map(self, client, session_id):
        request = dict(WATER_CYCLE_REQUEST, depth_profile="deep")
        client.post(f"{BASE}/sessions/{session_id}/generate", json=request)

        response = client.post(f"{BASE}/sessions/{session_id}/expand")

        assert response.status_code == 409
        assert response.json()["detail"] == Messages.error("no_expandable_nodes", "en")

    def test_budget_exhausted(self, client, session_id, manager):
        manager.get(session_id).max_expansions = 1
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)
        client.post(f"{BASE}/sessions/{session_id}/expand")

        response = client.post(f"{BASE}/sessions/{session_id}/expand")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "budget_exhausted"
        assert body["success"] is False
        assert body["expansions_remaining"] == 0
        assert body["can_expand"] is False


class TestVisualEdits:
    """Drag and clear endpoints."""

    def test_move_node(self, client, session_id):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        response = client.patch(
            f"{BASE}/sessions/{session_id}/nodes/concept-2/position",
            json={"x": 700, "y": 15.5}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == Messages.success("node_moved", "en")
        node = next(n for n in body["nodes"] if n["id"] == "concept-2")
        assert node["position"] == {"x": 700.0, "y": 15.5}

    def test_move_unknown_node(self, client, session_id):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        response = client.patch(f"{BASE}/sessions/{session_id}/nodes/nope/position", json={"x": 0, "y": 0})

        assert response.status_code == 404

    def test_move_without_map(self, client, session_id):
        response = client.patch(f"{BASE}/sessions/{session_id}/nodes/root/position", json={"x": 0, "y": 0})
        assert response.status_code == 400

    def test_clear(self, client, session_id):
        client.post(f"{BASE}/sessions/{session_id}/generate", json=WATER_CYCLE_REQUEST)

        response = client.post(f"{BASE}/sessions/{session_id}/clear")

        body = response.json()
        assert response.status_code == 200
        assert body["nodes"] == []
        assert body["expansion_count"] == 0
        assert body["message"] == Messages.success("session_cleared", "en")


class TestOptionsAndHealth:
    """Read-only endpoints."""

    def test_options(self, client):
        response = client.get(f"{BASE}/options")

        assert response.status_code == 200
        body = response.json()
        assert body["education_levels"] == ["initial", "primary", "secondary"]
        assert body["grades"]["initial"] == [3, 4, 5]
        assert body["depth_profiles"] == ["shallow", "standard", "deep"]
        assert set(body["languages"]) == {"en", "es"}
        assert 1 <= body["max_expansion_targets"] <= 4

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert "available_models" in body["llm"]
