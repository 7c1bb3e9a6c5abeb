"""API key generation and hashing.

Keys look like ``bkm_`` followed by 36 lowercase hex characters. Only the
SHA-256 hex digest and a short display prefix are ever stored; the plaintext
key is shown to the user once, at creation.
"""

from __future__ import annotations

import hashlib
import re
import secrets
import uuid
from dataclasses import dataclass

API_KEY_PREFIX = "bkm_"
API_KEY_LENGTH = 40
DISPLAY_PREFIX_LENGTH = 12

_API_KEY_RE = re.compile(r"^bkm_[a-f0-9]+$")


@dataclass(frozen=True)
class GeneratedAPIKey:
    """A freshly generated key and the values stored for it."""

    key: str
    key_hash: str
    prefix: str


def hash_api_key(key: str) -> str:
    """SHA-256 hex digest of a plaintext key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def generate_api_key() -> GeneratedAPIKey:
    """Create a new random API key."""
    random_part = secrets.token_hex(API_KEY_LENGTH)
    key = (API_KEY_PREFIX + random_part)[:API_KEY_LENGTH]
    return GeneratedAPIKey(
        key=key,
        key_hash=hash_api_key(key),
        prefix=key[:DISPLAY_PREFIX_LENGTH],
    )


def is_valid_api_key_format(key: str) -> bool:
    """Cheap shape check run before any database lookup."""
    return len(key) == API_KEY_LENGTH and bool(_API_KEY_RE.match(key))


def generate_id() -> str:
    """Short random identifier for users and keys."""
    return uuid.uuid4().hex[:16]
