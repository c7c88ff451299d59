"""
Tests for the saved critique history: the CritiqueHistory store and the
/critique-history endpoints.
"""
from __future__ import annotations

import pytest
from sqlalchemy.exc import SQLAlchemyError

from critiquelab.services.critique_history import CritiqueHistory

from test_gateway import FREE_CRITIQUE

ARGUMENT = "Remote work is strictly better for productivity because commutes waste time."

DEMO_CRITIQUE = {
    "coreClaimUnderFire": "Remote work beats the office.",
    "obviousWeaknesses": ["No data"],
    "whatWouldBreakThis": ["A productivity study"],
    "argumentStrengthScore": 3,
    "closingStatement": "Show your numbers.",
}


def _payload(persona="free", critique=None, **overrides) -> dict:
    payload = {
        "input_text": ARGUMENT,
        "persona": persona,
        "critique": critique or FREE_CRITIQUE,
    }
    payload.update(overrides)
    return payload


def _stored_free() -> dict:
    return dict(FREE_CRITIQUE, persona="free")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class TestCritiqueHistoryStore:
    def test_add_prepends_and_persists(self, db, client_key):
        history = CritiqueHistory(db, client_key)
        first = history.add_critique("first text", _stored_free(), "free")
        second = history.add_critique("second text", _stored_free(), "free")

        assert [c.id for c in history.critiques] == [second.id, first.id]
        reloaded = CritiqueHistory(db, client_key)
        assert [c.id for c in reloaded.critiques] == [second.id, first.id]
        assert reloaded.critiques[0].critique["primaryObjection"] == FREE_CRITIQUE["primaryObjection"]
        assert reloaded.critiques[0].created_at.tzinfo is not None

    def test_fifty_one_adds_keep_fifty(self, db, client_key):
        history = CritiqueHistory(db, client_key)
        added = [history.add_critique(f"text {i}", _stored_free(), "free") for i in range(51)]

        assert len(history) == 50
        assert history.critiques[0].id == added[-1].id
        assert added[0].id not in {c.id for c in history.critiques}
        assert len(CritiqueHistory(db, client_key)) == 50

    def test_get(self, db, client_key):
        history = CritiqueHistory(db, client_key)
        record = history.add_critique("text", _stored_free(), "free")
        assert history.get_critique(record.id) == record
        assert history.get_critique("missing") is None

    def test_delete(self, db, client_key):
        history = CritiqueHistory(db, client_key)
        keep = history.add_critique("keep", _stored_free(), "free")
        drop = history.add_critique("drop", _stored_free(), "free")

        history.delete_critique(drop.id)
        history.delete_critique("missing")
        assert [c.id for c in CritiqueHistory(db, client_key).critiques] == [keep.id]

    def test_clear_only_touches_own_client(self, db, client_key):
        other = CritiqueHistory(db, client_key + "-other")
        other.add_critique("other", _stored_free(), "free")
        history = CritiqueHistory(db, client_key)
        history.add_critique("mine", _stored_free(), "free")

        history.clear_history()
        assert len(history) == 0
        assert len(CritiqueHistory(db, client_key)) == 0
        assert len(CritiqueHistory(db, client_key + "-other")) == 1

    def test_failed_commit_keeps_in_memory_change(self, db, client_key, monkeypatch, caplog):
        history = CritiqueHistory(db, client_key)

        def broken_commit():
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(db, "commit", broken_commit)
        record = history.add_critique("text", _stored_free(), "free")
        assert [c.id for c in history.critiques] == [record.id]
        assert "Failed to save critique history" in caplog.text

        monkeypatch.undo()
        assert len(CritiqueHistory(db, client_key)) == 0


# ---------------------------------------------------------------------------
# /critique-history
# ---------------------------------------------------------------------------

class TestCritiqueHistoryEndpoints:
    def test_save_and_fetch(self, client, headers):
        r = client.post("/critique-history", json=_payload(), headers=headers)
        assert r.status_code == 201
        saved = r.json()
        assert saved["persona"] == "free"
        assert saved["input_text"] == ARGUMENT
        assert saved["critique"]["primaryObjection"] == FREE_CRITIQUE["primaryObjection"]
        assert saved["critique"]["persona"] == "free"

        fetched = client.get(f"/critique-history/{saved['id']}", headers=headers).json()
        assert fetched == saved

    def test_list_newest_first(self, client, headers):
        first = client.post("/critique-history", json=_payload(), headers=headers).json()
        second = client.post(
            "/critique-history", json=_payload("demo", DEMO_CRITIQUE), headers=headers
        ).json()
        body = client.get("/critique-history", headers=headers).json()
        assert body["total"] == 2
        assert [i["id"] for i in body["items"]] == [second["id"], first["id"]]
        assert body["items"][0]["critique"]["coreClaimUnderFire"] == "Remote work beats the office."

    def test_unknown_id_is_404(self, client, headers):
        r = client.get("/critique-history/nope", headers=headers)
        assert r.status_code == 404
        assert r.json()["code"] == "CRITIQUE_NOT_FOUND"
        assert r.json()["details"] == {"id": "nope"}

    def test_delete_and_clear(self, client, headers):
        a = client.post("/critique-history", json=_payload(), headers=headers).json()
        client.post("/critique-history", json=_payload(), headers=headers)

        assert client.delete(f"/critique-history/{a['id']}", headers=headers).status_code == 204
        assert client.delete("/critique-history/unknown", headers=headers).status_code == 204
        assert client.get("/critique-history", headers=headers).json()["total"] == 1

        assert client.delete("/critique-history", headers=headers).status_code == 204
        assert client.get("/critique-history", headers=headers).json()["total"] == 0

    def test_clients_are_isolated(self, client, headers):
        client.post("/critique-history", json=_payload(), headers=headers)
        other = {"X-Client-Id": headers["X-Client-Id"] + "-other"}
        assert client.get("/critique-history", headers=other).json()["total"] == 0

    def test_critique_must_match_persona(self, client, headers):
        r = client.post("/critique-history", json=_payload("demo", FREE_CRITIQUE), headers=headers)
        assert r.status_code == 422
        assert client.get("/critique-history", headers=headers).json()["total"] == 0

    def test_conflicting_persona_tag_rejected(self, client, headers):
        critique = dict(FREE_CRITIQUE, persona="free")
        r = client.post("/critique-history", json=_payload("demo", critique), headers=headers)
        assert r.status_code == 422

    @pytest.mark.parametrize("payload", [
        _payload(persona="villain"),
        _payload(input_text="short"),
        _payload(extra="field"),
        {"persona": "free", "critique": FREE_CRITIQUE},
    ])
    def test_invalid_requests(self, client, headers, payload):
        r = client.post("/critique-history", json=payload, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_saving_is_not_rate_limited(self, client, headers):
        for _ in range(12):
            assert client.post("/critique-history", json=_payload(), headers=headers).status_code == 201
