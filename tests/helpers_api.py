"""Shared helpers for API tests."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.dependencies import get_bookmark_analyzer
from bookmark_ai.analysis import BookmarkAnalyzer


class ScriptedEngine:
    """Reasoning engine double that replays a fixed reply and records prompts."""

    def __init__(self, reply: dict[str, Any] | str | Exception) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> list[dict[str, str]]:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        text = self.reply if isinstance(self.reply, str) else json.dumps(self.reply)
        return [{"type": "text", "text": text}]


class StaticFetcher:
    """Page fetcher double returning canned HTML (or None)."""

    def __init__(self, html: str | None = None) -> None:
        self.html = html
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str | None:
        self.urls.append(url)
        return self.html


def make_analyzer(
    reply: dict[str, Any] | str | Exception,
    html: str | None = None,
    **kwargs: Any,
) -> BookmarkAnalyzer:
    """Build a real analyzer around the test doubles."""
    return BookmarkAnalyzer(ScriptedEngine(reply), StaticFetcher(html), **kwargs)  # type: ignore[arg-type]


@contextmanager
def api_client(
    app: FastAPI,
    analyzer: BookmarkAnalyzer | None = None,
    *,
    raise_server_exceptions: bool = False,
) -> Iterator[TestClient]:
    """Create a TestClient with an optional analyzer override."""
    if analyzer is not None:
        app.dependency_overrides[get_bookmark_analyzer] = lambda: analyzer
    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def register(client: TestClient, email: str = "ada@example.com", **extra: Any) -> tuple[dict, str]:
    """Register an account; returns the user body and its API key."""
    response = client.post("/auth/register", json={"email": email, **extra})
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], body["apiKey"]


def auth_headers(api_key: str) -> dict[str, str]:
    return {"X-API-Key": api_key}
