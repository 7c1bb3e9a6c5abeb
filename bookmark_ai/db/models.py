"""Data models and constants for the Bookmark AI database."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from bookmark_ai.categories import CategoryTree


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _adapt_datetime(val: datetime) -> str:
    if val.tzinfo is not None:
        val = val.astimezone(timezone.utc).replace(tzinfo=None)
    return val.isoformat(" ")


def _convert_timestamp(val: bytes) -> datetime:
    """Convert stored timestamp bytes to a naive UTC datetime."""
    text = val.decode()
    if "T" in text:
        text = text.replace("T", " ", 1)
    if text.endswith("Z"):
        text = text[:-1]
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_timestamp)

# Default database path
BOOKMARK_AI_DB_PATH = Path.home() / ".bookmark_ai" / "bookmark_ai.db"


@dataclass
class UserSettings:
    """Per-user integration credentials and preferences."""

    instapaper_username: str | None = None
    instapaper_password: str | None = None
    todoist_api_token: str | None = None
    auto_bookmark: bool = False
    default_folder: str | None = None

    @property
    def instapaper_enabled(self) -> bool:
        # Instapaper accounts may have no password.
        return bool(self.instapaper_username)

    @property
    def todoist_enabled(self) -> bool:
        return bool(self.todoist_api_token)

    @classmethod
    def from_json(cls, raw: str | None) -> UserSettings:
        if not raw:
            return cls()
        data = json.loads(raw)
        return cls(
            instapaper_username=data.get("instapaper_username"),
            instapaper_password=data.get("instapaper_password"),
            todoist_api_token=data.get("todoist_api_token"),
            auto_bookmark=bool(data.get("auto_bookmark", False)),
            default_folder=data.get("default_folder"),
        )

    def to_json(self) -> str:
        return json.dumps(
            {
                "instapaper_username": self.instapaper_username,
                "instapaper_password": self.instapaper_password,
                "todoist_api_token": self.todoist_api_token,
                "auto_bookmark": self.auto_bookmark,
                "default_folder": self.default_folder,
            }
        )


@dataclass
class User:
    """An account. Identity comes from its API keys."""

    id: str
    email: str
    full_name: str | None = None
    settings: UserSettings = field(default_factory=UserSettings)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> User:
        return cls(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            settings=UserSettings.from_json(row["settings_json"]),
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


@dataclass
class APIKey:
    """Stored API key metadata. The plaintext key is never stored."""

    id: str
    user_id: str
    key_hash: str
    key_prefix: str
    name: str | None = None
    is_active: bool = True
    expires_at: datetime | None = None
    last_used_at: datetime | None = None
    created_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> APIKey:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            key_hash=row["key_hash"],
            key_prefix=row["key_prefix"],
            name=row["name"],
            is_active=bool(row["is_active"]),
            expires_at=row["expires_at"],
            last_used_at=row["last_used_at"],
            created_at=row["created_at"],
        )


@dataclass
class CategoryRecord:
    """A user's stored category tree, in raw JSON shape."""

    user_id: str
    category_tree: dict[str, Any]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def tree(self) -> CategoryTree:
        """The stored tree as a CategoryTree (validates on access)."""
        return CategoryTree.from_raw(self.category_tree)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> CategoryRecord:
        return cls(
            user_id=row["user_id"],
            category_tree=json.loads(row["category_tree"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
