"""Bookmark AI Configuration System.

Loads and validates configuration from ~/.bookmark_ai/config.json.
Uses Pydantic for schema validation with sensible defaults.

Secrets are never read from the config file; they come from the environment:
    ANTHROPIC_API_KEY                   Reasoning engine credentials
    BOOKMARK_AI_CONFIG                  Alternate config file path
    BOOKMARK_AI_DISABLE_REGISTRATION    "true" turns off sign-up

Supports migration from older config versions while preserving existing values.

Usage:
    from bookmark_ai.config import get_config

    config = get_config()
    print(config.analysis.model)
    print(config.rate_limit.analyze)
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".bookmark_ai" / "config.json"

# Current config schema version for migration tracking
CONFIG_VERSION = 1


class AnalysisConfig(BaseModel):
    """Bookmark classification settings.

    Attributes:
        model: Anthropic model used for classification.
        max_tokens: Maximum tokens in the engine response.
        content_char_limit: Page content is truncated to this many characters.
        user_agent: User-Agent sent when fetching page content.
        fetch_timeout_seconds: Timeout for the page content fetch.
        strict_category_match: Replace a matched category that was not offered
            as a candidate with "Other".
    """

    model: str = "claude-3-5-haiku-20241022"
    max_tokens: int = Field(default=1024, ge=64, le=8192)
    content_char_limit: int = Field(default=8000, ge=500, le=100_000)
    user_agent: str = "Mozilla/5.0 (compatible; Bookmark-AI/1.0)"
    fetch_timeout_seconds: float = Field(default=15.0, ge=1.0, le=120.0)
    strict_category_match: bool = True


class CategoriesConfig(BaseModel):
    """Limits applied when validating submitted category trees.

    Attributes:
        max_depth: Deepest allowed nesting of branches.
        max_nodes: Maximum number of branch and leaf nodes in one tree.
    """

    max_depth: int = Field(default=64, ge=1, le=1000)
    max_nodes: int = Field(default=10_000, ge=1, le=1_000_000)


class RateLimitConfig(BaseModel):
    """Rate limiting configuration for the API (slowapi limit strings).

    Attributes:
        enabled: Whether rate limiting is enabled.
        default: Limit applied to every endpoint without its own limit.
        analyze: Limit for bookmark analysis.
        registration: Limit for account registration.
        write: Limit for settings, category and API key writes.
    """

    enabled: bool = True
    default: str = "100/minute"
    analyze: str = "60/minute"
    registration: str = "3/hour"
    write: str = "30/minute"


class AuthConfig(BaseModel):
    """Authentication settings.

    Attributes:
        registration_enabled: Allow new accounts via POST /auth/register.
    """

    registration_enabled: bool = True


class DatabaseConfig(BaseModel):
    """SQLite storage settings."""

    path: str = str(Path.home() / ".bookmark_ai" / "bookmark_ai.db")


class ServerConfig(BaseModel):
    """HTTP server configuration.

    Attributes:
        cors_origins: Allowed CORS origins (browser extension, bookmarklet hosts).
    """

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost", "http://127.0.0.1"]
    )


class IntegrationsConfig(BaseModel):
    """Third-party integration endpoints.

    Attributes:
        instapaper_url: Instapaper Simple API "add" endpoint.
        todoist_url: Todoist REST tasks endpoint.
        timeout_seconds: Request timeout for integration calls.
    """

    instapaper_url: str = "https://www.instapaper.com/api/add"
    todoist_url: str = "https://api.todoist.com/rest/v2/tasks"
    timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)


class BookmarkAIConfig(BaseModel):
    """Bookmark AI configuration schema."""

    config_version: int = CONFIG_VERSION
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    categories: CategoriesConfig = Field(default_factory=CategoriesConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    integrations: IntegrationsConfig = Field(default_factory=IntegrationsConfig)

    @property
    def anthropic_api_key(self) -> str | None:
        """Anthropic API key from the environment."""
        return os.getenv("ANTHROPIC_API_KEY") or None

    @property
    def registration_enabled(self) -> bool:
        """Whether registration is allowed, honoring the env override."""
        if os.getenv("BOOKMARK_AI_DISABLE_REGISTRATION", "").lower() == "true":
            return False
        return self.auth.registration_enabled


# Module-level singleton with thread safety
_config: BookmarkAIConfig | None = None
_config_lock = threading.Lock()


# Migration registry mapping target versions to migration functions
_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {}


def _migrate_config(data: dict[str, Any]) -> dict[str, Any]:
    """Migrate config data from older versions to current schema.

    Args:
        data: Raw config data loaded from file.

    Returns:
        Migrated config data compatible with current schema.
    """
    version = data.get("config_version", 1)

    for target_version in sorted(_MIGRATIONS.keys()):
        if version < target_version:
            logger.info("Migrating config from version %d to %d", version, target_version)
            data = _MIGRATIONS[target_version](data)
            version = target_version

    data["config_version"] = CONFIG_VERSION
    return data


def _default_config_path() -> Path:
    env_path = os.getenv("BOOKMARK_AI_CONFIG")
    return Path(env_path) if env_path else CONFIG_PATH


def load_config(config_path: Path | None = None) -> BookmarkAIConfig:
    """Load configuration from file, return defaults if missing/invalid.

    Args:
        config_path: Optional path to config file. Defaults to ~/.bookmark_ai/config.json
            (or $BOOKMARK_AI_CONFIG).

    Returns:
        BookmarkAIConfig instance with loaded or default values.
    """
    path = config_path or _default_config_path()

    if not path.exists():
        logger.debug("Config file not found at %s, using defaults", path)
        return BookmarkAIConfig()

    try:
        with path.open() as f:
            data: dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in config file %s: %s, using defaults", path, e)
        return BookmarkAIConfig()
    except OSError as e:
        logger.warning("Cannot read config file %s: %s, using defaults", path, e)
        return BookmarkAIConfig()

    if not isinstance(data, dict):
        logger.warning("Config file %s does not contain an object, using defaults", path)
        return BookmarkAIConfig()

    original_version = data.get("config_version", 1)
    data = _migrate_config(data)

    try:
        config = BookmarkAIConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Config validation failed: %s, using defaults", e)
        return BookmarkAIConfig()

    if original_version < CONFIG_VERSION:
        logger.info("Persisting migrated config (v%d -> v%d)", original_version, CONFIG_VERSION)
        save_config(config, path)

    return config


def save_config(config: BookmarkAIConfig, config_path: Path | None = None) -> bool:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to config file.

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or _default_config_path()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            json.dump(config.model_dump(), f, indent=2)
        os.chmod(path, 0o600)
        logger.debug("Configuration saved to %s", path)
        return True
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        return False


def get_config() -> BookmarkAIConfig:
    """Get singleton configuration instance.

    Uses double-check locking for thread safety.

    Returns:
        Shared BookmarkAIConfig instance.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def reset_config() -> None:
    """Reset singleton configuration for testing."""
    global _config
    with _config_lock:
        _config = None
