"""Fixtures for API tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.main import create_app
from tests.helpers_api import api_client, register


@pytest.fixture
def app() -> FastAPI:
    """Create a fresh app instance for each test."""
    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    with api_client(app) as test_client:
        yield test_client


@pytest.fixture
def api_key(client: TestClient) -> str:
    """API key of a freshly registered account."""
    _, key = register(client)
    return key
