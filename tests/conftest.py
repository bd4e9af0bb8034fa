"""
Shared pytest fixtures for live bracket tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - fast subset (skips the 2..64 entrant sweep)
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.elimination import build_bracket
from core.tournament import TournamentService


@pytest.fixture
def four_player_bracket():
    """Bracket for A, B, C, D in that order."""
    return build_bracket(['A', 'B', 'C', 'D'])


@pytest.fixture
def five_player_bracket():
    """Bracket for A..E; E gets the bye."""
    return build_bracket(['A', 'B', 'C', 'D', 'E'])


@pytest.fixture
def service():
    """Tournament service that keeps the caller's player order."""
    return TournamentService(shuffle_players=False)


@pytest.fixture
def live_app(monkeypatch):
    """Point the Flask app at a fresh, unshuffled tournament and broadcaster."""
    import app as app_module

    settings = app_module.get_default_settings()
    settings['shuffle_players'] = False
    settings['heartbeat_seconds'] = 0.01
    tournament, broadcaster = app_module.create_tournament(settings)
    monkeypatch.setattr(app_module, 'settings', settings)
    monkeypatch.setattr(app_module, 'tournament', tournament)
    monkeypatch.setattr(app_module, 'broadcaster', broadcaster)
    return app_module


@pytest.fixture
def client(live_app):
    """Create a test client bound to the fresh tournament."""
    live_app.app.config['TESTING'] = True
    yield live_app.app.test_client()
