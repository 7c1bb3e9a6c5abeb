"""Pytest configuration for Bookmark AI tests.

Every test runs against its own config file and SQLite database under
``tmp_path``, with no Anthropic credentials and fresh singletons, so no test
touches ``~/.bookmark_ai`` or the network.
"""

import json
from pathlib import Path

import pytest

from api.ratelimit import limiter
from bookmark_ai.analysis import reset_analyzer
from bookmark_ai.config import CONFIG_VERSION, reset_config
from bookmark_ai.db import BookmarkDB, reset_db


def _reset_singletons() -> None:
    reset_config()
    reset_db()
    reset_analyzer()
    limiter.reset()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point configuration and storage at a per-test directory."""
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "config_version": CONFIG_VERSION,
                "database": {"path": str(tmp_path / "bookmark_ai.db")},
            }
        )
    )
    monkeypatch.setenv("BOOKMARK_AI_CONFIG", str(config_path))
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("BOOKMARK_AI_DISABLE_REGISTRATION", raising=False)

    _reset_singletons()
    yield config_path
    _reset_singletons()


@pytest.fixture
def db(tmp_path: Path) -> BookmarkDB:
    """A standalone database with the schema applied."""
    database = BookmarkDB(tmp_path / "standalone.db")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def sample_tree() -> dict:
    """A small tree with nested branches, leaves, and underscored labels."""
    return {
        "Work": {
            "Docs": [],
            "Code_Reviews": ["open", "merged"],
        },
        "Reading_List": [],
    }
