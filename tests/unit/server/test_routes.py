"""Tests for scoreboard and episode API endpoints."""

import pytest
from fastapi.testclient import TestClient

from glade.env.episode import EpisodeSummary
from glade.scoreboard import Scoreboard
from glade.server import create_app
from glade.server.routes import episodes as episode_routes
from glade.server.routes import scoreboard as scoreboard_routes
from glade.training.stats_collector import EpisodeStatsCollector


@pytest.fixture
def collector():
    c = EpisodeStatsCollector()
    c.report(EpisodeSummary("balancer", 0, 0.3, 150, "ball_fell"))
    c.report(EpisodeSummary("jumper", 0, 2.0, 500, "timeout"))
    c.report(EpisodeSummary("balancer", 1, 0.5, 250, "max_steps"))
    return c


@pytest.fixture
def client(collector):
    board = Scoreboard(countdown_s=10.0)
    board.reset()
    board.on_score_incremented(4)
    board.on_timer_elapsed(3.2)
    app = create_app(scoreboards={"jumper": board, "balancer": Scoreboard()}, collector=collector)
    return TestClient(app)


@pytest.fixture
def bare_client(monkeypatch):
    monkeypatch.setattr(scoreboard_routes, "_scoreboards", None)
    monkeypatch.setattr(episode_routes, "_collector", None)
    return TestClient(create_app())


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["agents"] == 2
    assert data["episodes"] == 3


def test_list_scoreboards_sorted(client):
    response = client.get("/api/scoreboards")
    assert response.status_code == 200
    assert [b["agent_id"] for b in response.json()] == ["balancer", "jumper"]


def test_get_scoreboard(client):
    response = client.get("/api/scoreboards/jumper")
    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 4
    assert data["countdown"] is True
    assert data["timer"] == pytest.approx(6.8)
    assert data["score_text"] == "Score: 4"
    assert data["timer_text"] == "Timer: 7"


def test_get_scoreboard_not_found(client):
    response = client.get("/api/scoreboards/nonexistent")
    assert response.status_code == 404


def test_list_episodes(client):
    response = client.get("/api/episodes")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    assert data[-1]["reason"] == "max_steps"


def test_list_episodes_for_agent(client):
    response = client.get("/api/episodes", params={"agent_id": "balancer", "limit": 1})
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["episode_index"] == 1


def test_list_episodes_unknown_agent(client):
    assert client.get("/api/episodes", params={"agent_id": "ghost"}).status_code == 404


def test_list_episodes_rejects_bad_limit(client):
    assert client.get("/api/episodes", params={"limit": 0}).status_code == 422


def test_summary(client):
    response = client.get("/api/episodes/summary")
    assert response.status_code == 200
    data = response.json()
    assert data["episodes"] == 3
    assert data["agents"]["balancer"]["episodes"] == 2
    assert data["agents"]["balancer"]["mean_reward"] == pytest.approx(0.4)
    assert data["agents"]["jumper"]["reasons"] == {"timeout": 1}


def test_uninitialized_routes_return_503(bare_client):
    assert bare_client.get("/api/scoreboards").status_code == 503
    assert bare_client.get("/api/scoreboards/jumper").status_code == 503
    assert bare_client.get("/api/episodes").status_code == 503
    assert bare_client.get("/api/episodes/summary").status_code == 503


def test_health_without_state(bare_client):
    data = bare_client.get("/health").json()
    assert data["agents"] == 0
    assert data["episodes"] == 0
