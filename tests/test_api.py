"""
Tests HTTP — GET /api/blocks, POST /api/selections, GET /api/selections/latest
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from unittest.mock import patch
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def client(tmp_path):
    """Client de test avec DB SQLite temporaire (seed au démarrage)."""
    from artemis_blocks.database import configure
    configure(f"sqlite:///{tmp_path / 'test.db'}")

    from artemis_blocks.api.main import app
    with TestClient(app) as c:
        yield c


def _ids(client) -> list:
    r = client.get("/api/blocks")
    assert r.status_code == 200
    return [b["id"] for b in r.json()]


def _count_selections() -> int:
    from artemis_blocks.database import SessionLocal, db_count_selections
    with SessionLocal() as db:
        return db_count_selections(db)


# ── GET /api/blocks ───────────────────────────────────────────────────────

class TestListBlocks:
    def test_seeded_catalog(self, client):
        r = client.get("/api/blocks")
        assert r.status_code == 200
        body = r.json()
        assert len(body) == 5
        assert [b["title"] for b in body] == [
            "Block 1", "Academy", "Event Companies", "Local Clubs", "Community Groups",
        ]

    def test_block_shape(self, client):
        b = client.get("/api/blocks").json()[0]
        assert set(b) == {"id", "title", "description", "type", "icon", "selected"}
        assert b["type"] == "grouped"
        assert b["selected"] is False
        assert b["icon"] == "/icons/ico-org.png"

    def test_optional_description(self, client):
        academy = client.get("/api/blocks").json()[1]
        assert academy["title"] == "Academy"
        assert academy["description"] is None

    def test_store_failure_500(self, client):
        with patch("artemis_blocks.api.routes.blocks.list_all", side_effect=SQLAlchemyError("down")):
            r = client.get("/api/blocks")
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to fetch blocks"}


# ── POST /api/selections ──────────────────────────────────────────────────

class TestSaveSelection:
    def test_returns_201_with_resolved_blocks(self, client):
        ids = _ids(client)[:2]
        r = client.post("/api/selections", json={"blockIds": ids})
        assert r.status_code == 201
        body = r.json()
        assert body["message"] == "Selection saved successfully"
        assert [b["id"] for b in body["selection"]["blockIds"]] == ids
        assert body["selection"]["blockIds"][0]["title"] == "Block 1"
        assert body["selection"]["timestamp"] is not None

    def test_unknown_id_400(self, client):
        ids = _ids(client)[:1] + ["inexistant"]
        r = client.post("/api/selections", json={"blockIds": ids})
        assert r.status_code == 400
        assert r.json() == {"error": "One or more block IDs are invalid or do not exist."}

    def test_unknown_id_keeps_previous_selection(self, client):
        ids = _ids(client)
        client.post("/api/selections", json={"blockIds": ids[:3]})
        r = client.post("/api/selections", json={"blockIds": [ids[0], "inexistant"]})
        assert r.status_code == 400
        assert client.get("/api/selections/latest").json() == {"blockIds": ids[:3]}
        assert _count_selections() == 1

    def test_duplicate_ids_400(self, client):
        first = _ids(client)[0]
        r = client.post("/api/selections", json={"blockIds": [first, first]})
        assert r.status_code == 400

    @pytest.mark.parametrize("payload", [
        {"blockIds": "abc"},
        {"blockIds": {"id": "abc"}},
        {"blockIds": None},
        {"block_ids": ["x"]},
        {},
    ])
    def test_not_an_array_400(self, client, payload):
        r = client.post("/api/selections", json=payload)
        assert r.status_code == 400
        assert r.json() == {"error": "Invalid selection data. Block IDs must be an array."}

    def test_non_string_ids_unknown_reference(self, client):
        r = client.post("/api/selections", json={"blockIds": [1, 2]})
        assert r.status_code == 400
        assert r.json() == {"error": "One or more block IDs are invalid or do not exist."}

    def test_body_not_an_object_400(self, client):
        r = client.post("/api/selections", json=["a", "b"])
        assert r.status_code == 400
        assert "error" in r.json()

    def test_missing_body_400(self, client):
        r = client.post("/api/selections")
        assert r.status_code == 400

    def test_empty_array_accepted(self, client):
        r = client.post("/api/selections", json={"blockIds": []})
        assert r.status_code == 201
        assert r.json()["selection"]["blockIds"] == []

    def test_validation_store_failure_500(self, client):
        ids = _ids(client)[:1]
        with patch("artemis_blocks.selection.db_find_blocks", side_effect=SQLAlchemyError("down")):
            r = client.post("/api/selections", json={"blockIds": ids})
        assert r.status_code == 500
        assert r.json() == {"error": "Validation failed. Please try again."}

    def test_persistence_failure_500(self, client):
        ids = _ids(client)[:1]
        with patch("artemis_blocks.api.routes.selections.replace_selection", side_effect=SQLAlchemyError("down")):
            r = client.post("/api/selections", json={"blockIds": ids})
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to save selection. Please try again."}


# ── GET /api/selections/latest ────────────────────────────────────────────

class TestLatestSelection:
    def test_empty_when_never_saved(self, client):
        r = client.get("/api/selections/latest")
        assert r.status_code == 200
        assert r.json() == {"blockIds": []}

    def test_roundtrip_preserves_order(self, client):
        ids = list(reversed(_ids(client)))[:4]
        client.post("/api/selections", json={"blockIds": ids})
        assert client.get("/api/selections/latest").json() == {"blockIds": ids}

    def test_second_post_replaces_first(self, client):
        ids = _ids(client)
        assert client.post("/api/selections", json={"blockIds": ids[:2]}).status_code == 201
        assert client.post("/api/selections", json={"blockIds": ids[3:]}).status_code == 201
        assert client.get("/api/selections/latest").json() == {"blockIds": ids[3:]}
        assert _count_selections() == 1

    def test_store_failure_500(self, client):
        with patch("artemis_blocks.api.routes.selections.get_latest", side_effect=SQLAlchemyError("down")):
            r = client.get("/api/selections/latest")
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to fetch latest selection"}


# ── Divers ────────────────────────────────────────────────────────────────

def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_cors_headers(client):
    r = client.get("/api/blocks", headers={"Origin": "http://localhost:3000"})
    assert r.headers.get("access-control-allow-origin") == "*"
