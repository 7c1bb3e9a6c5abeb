"""Tests for registration, API key authentication, and /users/me endpoints."""

import json
import secrets
import sqlite3
from datetime import timedelta

import pytest

from bookmark_ai.categories import default_category_tree
from bookmark_ai.config import CONFIG_VERSION, reset_config
from bookmark_ai.db import get_db, utcnow
from bookmark_ai.security import hash_api_key
from tests.helpers_api import auth_headers, register


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_returns_user_and_key(self, client):
        response = client.post(
            "/auth/register", json={"email": "Ada@Example.com", "fullName": "Ada Lovelace"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["apiKey"].startswith("bkm_")
        assert len(body["apiKey"]) == 40
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["fullName"] == "Ada Lovelace"
        assert body["user"]["settings"] == {
            "autoBookmark": False,
            "defaultFolder": None,
            "instapaperEnabled": False,
            "todoistEnabled": False,
        }

    def test_register_seeds_default_tree(self, client):
        user, key = register(client)

        response = client.get("/categories", headers=auth_headers(key))

        assert response.status_code == 200
        assert response.json()["categoryTree"] == default_category_tree().to_raw()

    def test_register_creates_default_key(self, client):
        _, key = register(client)

        keys = client.get("/users/me/api-keys", headers=auth_headers(key)).json()["apiKeys"]

        assert len(keys) == 1
        assert keys[0]["name"] == "Default"
        assert keys[0]["prefix"] == key[:12]

    def test_duplicate_email_conflicts(self, client):
        register(client, "ada@example.com")

        response = client.post("/auth/register", json={"email": "ADA@example.com"})

        assert response.status_code == 409
        assert response.json()["code"] == "ACC_EMAIL_EXISTS"

    @pytest.mark.parametrize("email", ["not-an-email", "@example.com", "ada@localhost", ""])
    def test_invalid_email(self, client, email):
        response = client.post("/auth/register", json={"email": email})

        assert response.status_code == 400
        assert response.json()["code"] == "VAL_INVALID_INPUT"

    def test_registration_disabled_by_env(self, client, monkeypatch):
        monkeypatch.setenv("BOOKMARK_AI_DISABLE_REGISTRATION", "true")

        response = client.post("/auth/register", json={"email": "ada@example.com"})

        assert response.status_code == 403
        assert response.json()["code"] == "AUTH_REGISTRATION_DISABLED"

    def test_register_is_rate_limited(self, client):
        for i in range(3):
            register(client, f"user{i}@example.com")

        response = client.post("/auth/register", json={"email": "user4@example.com"})

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMIT_EXCEEDED"
        assert "Retry-After" in response.headers

    def test_register_limit_ignores_unchecked_api_keys(self, client):
        """A fresh X-API-Key on each call does not open a new bucket."""
        for i in range(3):
            response = client.post(
                "/auth/register",
                headers={"X-API-Key": f"bkm_{secrets.token_hex(18)}"},
                json={"email": f"user{i}@example.com"},
            )
            assert response.status_code == 201

        response = client.post(
            "/auth/register",
            headers={"X-API-Key": f"bkm_{secrets.token_hex(18)}"},
            json={"email": "user4@example.com"},
        )

        assert response.status_code == 429

    def test_failed_key_write_rolls_back_account(self, client, monkeypatch):
        def fail():
            raise sqlite3.OperationalError("disk I/O error")

        with monkeypatch.context() as m:
            m.setattr("bookmark_ai.db.api_keys.generate_api_key", fail)
            response = client.post("/auth/register", json={"email": "ada@example.com"})

        assert response.status_code == 500
        assert get_db().get_user_by_email("ada@example.com") is None
        # A retry is not blocked by a half-created account.
        register(client, "ada@example.com")


class TestAuthentication:
    """Tests for X-API-Key resolution."""

    def test_missing_key(self, client):
        response = client.get("/users/me")

        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_MISSING_CREDENTIALS"
        assert response.headers["WWW-Authenticate"] == "ApiKey"

    def test_malformed_key(self, client):
        response = client.get("/users/me", headers=auth_headers("not-a-key"))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key format"

    def test_unknown_key(self, client):
        response = client.get("/users/me", headers=auth_headers("bkm_" + "0" * 36))

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired API key"

    def test_expired_key(self, client, api_key):
        db = get_db()
        record = db.get_api_key_by_hash(hash_api_key(api_key))
        with db.connection() as conn:
            conn.execute(
                "UPDATE api_keys SET expires_at = ? WHERE id = ?",
                (utcnow() - timedelta(seconds=1), record.id),
            )

        response = client.get("/users/me", headers=auth_headers(api_key))

        assert response.status_code == 401

    def test_revoked_key(self, client, api_key):
        db = get_db()
        with db.connection() as conn:
            conn.execute("UPDATE api_keys SET is_active = 0")

        assert client.get("/users/me", headers=auth_headers(api_key)).status_code == 401

    def test_inactive_account(self, client, api_key):
        db = get_db()
        with db.connection() as conn:
            conn.execute("UPDATE users SET is_active = 0")

        response = client.get("/users/me", headers=auth_headers(api_key))

        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_ACCOUNT_INACTIVE"

    def test_use_updates_last_used(self, client, api_key):
        client.get("/users/me", headers=auth_headers(api_key))

        keys = client.get("/users/me/api-keys", headers=auth_headers(api_key)).json()["apiKeys"]

        assert keys[0]["lastUsedAt"] is not None


class TestCurrentUser:
    """Tests for GET/PUT/DELETE /users/me."""

    def test_get_me(self, client):
        user, key = register(client, fullName="Ada")

        body = client.get("/users/me", headers=auth_headers(key)).json()

        assert body["id"] == user["id"]
        assert body["fullName"] == "Ada"

    def test_update_settings_never_echoes_secrets(self, client, api_key):
        response = client.put(
            "/users/me",
            headers=auth_headers(api_key),
            json={
                "fullName": "Ada King",
                "settings": {
                    "instapaperUsername": "ada@example.com",
                    "instapaperPassword": "hunter2",
                    "todoistApiToken": "tok-123",
                },
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["fullName"] == "Ada King"
        assert body["settings"]["instapaperEnabled"] is True
        assert body["settings"]["todoistEnabled"] is True
        assert "hunter2" not in response.text
        assert "tok-123" not in response.text

    def test_partial_settings_update_keeps_other_fields(self, client, api_key):
        headers = auth_headers(api_key)
        client.put("/users/me", headers=headers, json={"settings": {"todoistApiToken": "tok"}})

        body = client.put(
            "/users/me", headers=headers, json={"settings": {"autoBookmark": True}}
        ).json()

        assert body["settings"]["todoistEnabled"] is True
        assert body["settings"]["autoBookmark"] is True

    def test_update_with_empty_body_is_noop(self, client):
        _, key = register(client, fullName="Ada")

        response = client.put("/users/me", headers=auth_headers(key), json={})

        assert response.status_code == 200
        assert response.json()["fullName"] == "Ada"

    def test_delete_me(self, client, api_key):
        headers = auth_headers(api_key)

        assert client.delete("/users/me", headers=headers).status_code == 204
        assert client.get("/users/me", headers=headers).status_code == 401


class TestAPIKeyManagement:
    """Tests for /users/me/api-keys."""

    def test_create_key(self, client, api_key):
        response = client.post(
            "/users/me/api-keys", headers=auth_headers(api_key), json={"name": "Laptop"}
        )

        assert response.status_code == 201
        body = response.json()
        new_key = body["apiKey"]
        assert new_key != api_key
        assert body["keyInfo"]["name"] == "Laptop"
        assert body["keyInfo"]["isActive"] is True
        assert client.get("/users/me", headers=auth_headers(new_key)).status_code == 200

    def test_list_does_not_expose_keys(self, client, api_key):
        client.post("/users/me/api-keys", headers=auth_headers(api_key), json={"name": "Second"})

        response = client.get("/users/me/api-keys", headers=auth_headers(api_key))

        assert len(response.json()["apiKeys"]) == 2
        assert api_key not in response.text

    def test_create_with_future_expiry(self, client, api_key):
        expires = (utcnow() + timedelta(days=30)).isoformat() + "Z"

        response = client.post(
            "/users/me/api-keys",
            headers=auth_headers(api_key),
            json={"name": "Temp", "expiresAt": expires},
        )

        assert response.status_code == 201
        assert response.json()["keyInfo"]["expiresAt"] is not None

    def test_create_with_past_expiry_rejected(self, client, api_key):
        response = client.post(
            "/users/me/api-keys",
            headers=auth_headers(api_key),
            json={"name": "Old", "expiresAt": "2000-01-01T00:00:00Z"},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "expiresAt"

    def test_create_requires_name(self, client, api_key):
        response = client.post("/users/me/api-keys", headers=auth_headers(api_key), json={})
        assert response.status_code == 400

    def test_delete_key(self, client, api_key):
        headers = auth_headers(api_key)
        created = client.post("/users/me/api-keys", headers=headers, json={"name": "Temp"}).json()
        key_id = created["keyInfo"]["id"]

        assert client.delete(f"/users/me/api-keys/{key_id}", headers=headers).status_code == 204
        assert client.get("/users/me", headers=auth_headers(created["apiKey"])).status_code == 401

    def test_delete_other_users_key(self, client):
        _, ada_key = register(client, "ada@example.com")
        _, bob_key = register(client, "bob@example.com")
        bob_keys = client.get("/users/me/api-keys", headers=auth_headers(bob_key)).json()

        response = client.delete(
            f"/users/me/api-keys/{bob_keys['apiKeys'][0]['id']}", headers=auth_headers(ada_key)
        )

        assert response.status_code == 404
        assert response.json()["code"] == "ACC_KEY_NOT_FOUND"


def test_rate_limits_follow_config(client, api_key, isolated_environment):
    """Write limits are read from config on every request."""
    isolated_environment.write_text(
        json.dumps(
            {
                "config_version": CONFIG_VERSION,
                "database": {"path": str(isolated_environment.parent / "bookmark_ai.db")},
                "rate_limit": {"write": "1/minute"},
            }
        )
    )
    reset_config()
    headers = auth_headers(api_key)

    assert client.put("/users/me", headers=headers, json={"fullName": "A"}).status_code == 200
    assert client.put("/users/me", headers=headers, json={"fullName": "B"}).status_code == 429
