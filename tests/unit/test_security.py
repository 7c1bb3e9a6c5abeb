"""Unit tests for API key generation and hashing."""

import hashlib

import pytest

from bookmark_ai.security import (
    API_KEY_LENGTH,
    API_KEY_PREFIX,
    generate_api_key,
    generate_id,
    hash_api_key,
    is_valid_api_key_format,
)


class TestGenerateAPIKey:
    def test_shape(self):
        generated = generate_api_key()

        assert generated.key.startswith(API_KEY_PREFIX)
        assert len(generated.key) == API_KEY_LENGTH == 40
        assert is_valid_api_key_format(generated.key)

    def test_hash_and_prefix(self):
        generated = generate_api_key()

        assert generated.key_hash == hashlib.sha256(generated.key.encode()).hexdigest()
        assert generated.prefix == generated.key[:12]

    def test_keys_are_unique(self):
        keys = {generate_api_key().key for _ in range(50)}
        assert len(keys) == 50


class TestIsValidAPIKeyFormat:
    @pytest.mark.parametrize(
        "key",
        [
            "",
            "bkm_",
            "bkm_" + "a" * 35,
            "bkm_" + "a" * 37,
            "BKM_" + "a" * 36,
            "bkm_" + "A" * 36,
            "key_" + "a" * 36,
            "bkm_" + "g" * 36,
        ],
    )
    def test_rejects(self, key):
        assert is_valid_api_key_format(key) is False

    def test_accepts(self):
        assert is_valid_api_key_format("bkm_" + "0123456789abcdef" * 2 + "abcd") is True


def test_hash_is_stable():
    assert hash_api_key("bkm_x") == hash_api_key("bkm_x")
    assert hash_api_key("bkm_x") != hash_api_key("bkm_y")


def test_generate_id():
    ids = {generate_id() for _ in range(20)}
    assert len(ids) == 20
    assert all(len(i) == 16 for i in ids)
