"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from todo_web.config import ConfigModel, reset_config  # noqa: E402
from todo_web.storage import reset_database_store  # noqa: E402
from todo_web.web.server import create_app  # noqa: E402


@pytest.fixture
def make_config(tmp_path):
    """Build a configuration rooted in a temporary directory"""
    def _make(storage="session"):
        return ConfigModel(
            data_dir=str(tmp_path),
            database_path=str(tmp_path / "todos.db"),
            storage=storage,
            session_secret="test-secret",
        )
    return _make


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached configuration and database store between tests"""
    yield
    reset_config()
    reset_database_store()


@pytest.fixture(params=["session", "database"])
def client(request, make_config):
    """Test client for each storage backend"""
    app = create_app(make_config(request.param))
    return TestClient(app)
