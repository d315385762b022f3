"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from tictactoe import config
from tictactoe.app import ai, offline
from tictactoe.app.main import app


@pytest.fixture(autouse=True)
def clear_sessions():
    yield
    offline.active_games.clear()
    offline.active_player_ids.clear()
    ai.active_ai_games.clear()
    ai.active_ai_player_ids.clear()


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Make every test read settings afresh from its own environment."""
    monkeypatch.setattr(config, "_settings", None)


@pytest.fixture
def use_settings(monkeypatch):
    """Install settings built from keyword overrides.

    Returns:
        Function taking ``Settings`` field overrides.
    """

    def install(**overrides):
        settings = config.Settings(**overrides)
        monkeypatch.setattr(config, "_settings", settings)
        return settings

    return install


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as client:
        yield client
