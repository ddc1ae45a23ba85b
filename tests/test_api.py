"""Tests for the REST API: map, state, MoveTo commands and control."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from pathmove.api.app import create_app
from pathmove.api.routes.map import rle_encode
from pathmove.config import SimulationConfig


@pytest.fixture
def client():
    cfg = SimulationConfig(world_seed=7, grid_width=16, grid_height=12, num_walkers=2, log_level="WARNING")
    with TestClient(create_app(cfg, autostart=False)) as c:
        yield c


class TestRLE:
    def test_encode(self):
        assert rle_encode([1, 1, 0, 0, 0, 1]) == [1, 2, 0, 3, 1, 1]
        assert rle_encode([]) == []


class TestMap:
    def test_map_decodes_to_full_grid(self, client):
        resp = client.get("/api/v1/map")
        assert resp.status_code == 200
        data = resp.json()
        assert (data["width"], data["height"]) == (16, 12)
        rle = data["grid"]
        assert sum(rle[i + 1] for i in range(0, len(rle), 2)) == 16 * 12
        assert data["edge_blocks"] == {}


class TestState:
    def test_initial_state(self, client):
        data = client.get("/api/v1/state").json()
        assert data["tick"] == 0
        kinds = [c["kind"] for c in data["characters"]]
        assert kinds == ["player", "event", "event"]
        assert all(c["session_state"] == "IDLE" for c in data["characters"])

    def test_character_lookup(self, client):
        resp = client.get("/api/v1/state/characters/-1")
        assert resp.status_code == 200
        assert resp.json()["kind"] == "player"
        assert client.get("/api/v1/state/characters/999").status_code == 404

    def test_stats(self, client):
        data = client.get("/api/v1/stats").json()
        assert data["character_count"] == 3
        assert data["running"] is False


class TestMoveTo:
    def test_queue_then_step(self, client):
        resp = client.post("/api/v1/commands/move-to", json={
            "subject": "player", "targetType": "coordinates", "targetX": 10, "targetY": 8,
        })
        assert resp.status_code == 202
        assert resp.json()["status"] == "queued"

        step = client.post("/api/v1/control/step")
        assert step.status_code == 200
        assert step.json()["tick"] == 1

        state = client.get("/api/v1/state").json()
        assert any(e["category"] == "command" for e in state["events"])
        player = next(c for c in state["characters"] if c["kind"] == "player")
        assert player["target"] == [10, 8] or player["last_outcome"] == "UNREACHABLE"
        assert client.get("/api/v1/stats").json()["commands_accepted"] == 1

    def test_event_subject_by_snake_case_name(self, client):
        resp = client.post("/api/v1/commands/move-to", json={
            "subject": "event", "subject_event_id": 1, "target_type": "player",
        })
        assert resp.status_code == 202

    def test_unknown_event_is_404(self, client):
        resp = client.post("/api/v1/commands/move-to", json={
            "subject": "event", "subjectEventId": 99, "targetX": 1, "targetY": 1,
        })
        assert resp.status_code == 404
        assert client.get("/api/v1/stats").json()["commands_rejected"] == 1

    def test_out_of_bounds_target_is_422(self, client):
        resp = client.post("/api/v1/commands/move-to", json={"targetX": 16, "targetY": 0})
        assert resp.status_code == 422

    def test_this_event_is_422(self, client):
        resp = client.post("/api/v1/commands/move-to", json={"subject": "thisEvent"})
        assert resp.status_code == 422

    def test_bad_enum_is_422(self, client):
        resp = client.post("/api/v1/commands/move-to", json={"subject": "nobody"})
        assert resp.status_code == 422


class TestControlAndConfig:
    def test_config(self, client):
        data = client.get("/api/v1/config").json()
        assert data["grid_width"] == 16
        assert data["max_iteration"] == 500
        assert data["stuck_threshold"] == 3
        assert data["through_if_hard_blocked"] is True

    def test_pause_when_stopped_is_error(self, client):
        assert client.post("/api/v1/control/pause").json()["status"] == "error"

    def test_unknown_action_is_422(self, client):
        assert client.post("/api/v1/control/explode").status_code == 422

    def test_reset_returns_to_tick_zero(self, client):
        client.post("/api/v1/control/step")
        client.post("/api/v1/control/step")
        assert client.get("/api/v1/state").json()["tick"] == 2
        resp = client.post("/api/v1/control/reset")
        assert resp.json()["tick"] == 0

    def test_speed(self, client):
        assert client.post("/api/v1/speed", params={"tps": 10}).status_code == 200
        assert client.get("/api/v1/config").json()["tick_rate"] == pytest.approx(0.1)
