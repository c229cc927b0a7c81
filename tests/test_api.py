"""Tests for the FastAPI API endpoints."""

import pytest
from fastapi.testclient import TestClient

from water_saver.api.app import create_app
from water_saver.models.config import GameConfig


class Recorder:
    def __init__(self):
        self.completions = []
        self.exits = 0

    def on_game_complete(self, success, score):
        self.completions.append((success, score))

    def on_exit(self):
        self.exits += 1


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder):
    """Create a test client with a manually ticked game."""
    app = create_app(
        config=GameConfig(auto_tick=False, initial_level=50),
        on_game_complete=recorder.on_game_complete,
        on_exit=recorder.on_exit,
    )
    with TestClient(app) as test_client:
        yield test_client


class TestViewEndpoints:
    def test_get_game(self, client):
        response = client.get("/game")
        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "pre_game"
        assert data["tank_percent"] == 50
        assert data["total_sources"] == 3
        assert data["instructions"]["title"] == "Water Saver Mission"

    def test_get_config(self, client):
        response = client.get("/game/config")
        assert response.status_code == 200
        assert response.json()["base_drain_rate"] == 15

    def test_update_config_before_start(self, client):
        config = GameConfig(auto_tick=False, initial_level=70).model_dump(mode="json")
        response = client.put("/game/config", json=config)
        assert response.status_code == 200
        assert response.json()["resource_level"] == 70

    def test_update_config_rejected_while_active(self, client):
        client.post("/game/start")
        config = GameConfig(auto_tick=False).model_dump(mode="json")
        response = client.put("/game/config", json=config)
        assert response.status_code == 409


class TestLifecycleEndpoints:
    def test_start(self, client):
        response = client.post("/game/start")
        assert response.status_code == 200
        assert response.json()["phase"] == "active"

    def test_start_twice_conflicts(self, client):
        client.post("/game/start")
        response = client.post("/game/start")
        assert response.status_code == 409

    def test_tick(self, client):
        client.post("/game/start")
        response = client.post("/game/tick")
        assert response.status_code == 200
        data = response.json()
        assert data["applied"] is True
        # 50 - 34
        assert data["game"]["resource_level"] == 16
        assert data["game"]["elapsed_ticks"] == 1

    def test_tick_before_start_not_applied(self, client):
        response = client.post("/game/tick")
        assert response.json()["applied"] is False

    def test_loss_then_replay(self, client, recorder):
        client.post("/game/start")
        client.post("/game/tick")
        response = client.post("/game/tick")
        data = response.json()["game"]
        assert data["phase"] == "terminal"
        assert data["result"]["outcome"] == "lost"
        assert data["result"]["reward"] == {"coins": 10, "xp": 30}
        assert recorder.completions == [(False, 30)]

        response = client.post("/game/replay")
        assert response.status_code == 200
        data = response.json()
        assert data["phase"] == "pre_game"
        assert data["elapsed_ticks"] == 0
        assert data["result"] is None

    def test_replay_while_active_conflicts(self, client):
        client.post("/game/start")
        response = client.post("/game/replay")
        assert response.status_code == 409

    def test_exit_from_pre_game(self, client, recorder):
        response = client.post("/game/exit")
        assert response.status_code == 200
        assert response.json()["phase"] == "exited"
        assert recorder.exits == 1
        assert recorder.completions == []


class TestPlayerEndpoints:
    def test_fix_leak(self, client):
        client.post("/game/start")
        response = client.post("/game/leaks/tap/fix")
        assert response.status_code == 200
        data = response.json()
        assert data["applied"] is True
        assert data["game"]["leaks_fixed"] == 1
        assert data["game"]["messages"] == ["✓ Fixed Kitchen Tap!"]

    def test_fix_unknown_leak(self, client):
        client.post("/game/start")
        response = client.post("/game/leaks/garden_hose/fix")
        assert response.status_code == 404

    def test_fix_before_start_not_applied(self, client):
        response = client.post("/game/leaks/tap/fix")
        assert response.status_code == 200
        assert response.json()["applied"] is False

    def test_toggle_choice(self, client):
        client.post("/game/start")
        response = client.post("/game/choices/bucket/toggle")
        assert response.status_code == 200
        game = response.json()["game"]
        assert game["drain_rate"] == 26
        assert game["choices"][0]["adopted"] is True

    def test_toggle_unknown_choice(self, client):
        client.post("/game/start")
        response = client.post("/game/choices/rain_barrel/toggle")
        assert response.status_code == 404

    def test_fullscreen(self, client):
        response = client.post("/game/fullscreen")
        assert response.json() == {"fullscreen": True}
        assert client.get("/game").json()["fullscreen"] is True
        assert client.get("/game").json()["phase"] == "pre_game"


class TestClockedApp:
    def test_clock_runs_under_app_and_stops_on_shutdown(self):
        app = create_app(config=GameConfig(tick_interval_seconds=60))
        with TestClient(app) as client:
            client.post("/game/start")
            assert app.state.game.clock.running is True
        assert app.state.game.clock.running is False
