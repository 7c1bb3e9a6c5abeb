"""Account, registration, and API key models.

Secrets are write-only: integration credentials can be set through
``UserUpdateRequest`` but responses only say whether they are configured.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from bookmark_ai.db import APIKey, User


class RegisterRequest(BaseModel):
    """Create an account and receive its first API key."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"email": "ada@example.com", "fullName": "Ada Lovelace"}},
    )

    email: str = Field(..., description="Account email", max_length=255)
    full_name: str | None = Field(
        default=None, alias="fullName", min_length=1, max_length=255
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Minimal shape check: one @ with text on both sides and a dotted domain."""
        v = v.strip()
        local, sep, domain = v.partition("@")
        if not sep or not local or "." not in domain or domain.startswith(".") or " " in v:
            raise ValueError("Invalid email address")
        return v


class UserSettingsResponse(BaseModel):
    """Public view of a user's settings."""

    model_config = ConfigDict(populate_by_name=True)

    auto_bookmark: bool = Field(default=False, alias="autoBookmark")
    default_folder: str | None = Field(default=None, alias="defaultFolder")
    instapaper_enabled: bool = Field(
        default=False,
        alias="instapaperEnabled",
        description="True when Instapaper credentials are stored",
    )
    todoist_enabled: bool = Field(
        default=False,
        alias="todoistEnabled",
        description="True when a Todoist token is stored",
    )


class UserResponse(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f2a9c1d8e7b6a54",
                "email": "ada@example.com",
                "fullName": "Ada Lovelace",
                "createdAt": "2024-01-15T10:30:00",
                "settings": {
                    "autoBookmark": False,
                    "defaultFolder": None,
                    "instapaperEnabled": True,
                    "todoistEnabled": False,
                },
            }
        },
    )

    id: str
    email: str
    full_name: str | None = Field(default=None, alias="fullName")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    settings: UserSettingsResponse = Field(default_factory=UserSettingsResponse)

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        settings = user.settings
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            created_at=user.created_at,
            settings=UserSettingsResponse(
                auto_bookmark=settings.auto_bookmark,
                default_folder=settings.default_folder,
                instapaper_enabled=settings.instapaper_enabled,
                todoist_enabled=settings.todoist_enabled,
            ),
        )


class UserSettingsUpdate(BaseModel):
    """Settings fields to change; omitted fields keep their values."""

    model_config = ConfigDict(populate_by_name=True)

    instapaper_username: str | None = Field(default=None, alias="instapaperUsername")
    instapaper_password: str | None = Field(default=None, alias="instapaperPassword")
    todoist_api_token: str | None = Field(default=None, alias="todoistApiToken")
    auto_bookmark: bool | None = Field(default=None, alias="autoBookmark")
    default_folder: str | None = Field(default=None, alias="defaultFolder")


class UserUpdateRequest(BaseModel):
    """Partial profile update."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "fullName": "Ada King",
                "settings": {"todoistApiToken": "0123456789abcdef", "autoBookmark": True},
            }
        },
    )

    full_name: str | None = Field(default=None, alias="fullName", min_length=1, max_length=255)
    settings: UserSettingsUpdate | None = None


class APIKeyInfo(BaseModel):
    """Stored API key metadata (never the key itself)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    prefix: str = Field(..., description="First characters of the key, for recognition")
    is_active: bool = Field(..., alias="isActive")
    expires_at: datetime | None = Field(default=None, alias="expiresAt")
    last_used_at: datetime | None = Field(default=None, alias="lastUsedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @classmethod
    def from_record(cls, record: APIKey) -> APIKeyInfo:
        return cls(
            id=record.id,
            name=record.name,
            prefix=record.key_prefix,
            is_active=record.is_active,
            expires_at=record.expires_at,
            last_used_at=record.last_used_at,
            created_at=record.created_at,
        )


class APIKeyListResponse(BaseModel):
    """All of the caller's API keys."""

    model_config = ConfigDict(populate_by_name=True)

    api_keys: list[APIKeyInfo] = Field(default_factory=list, alias="apiKeys")


class APIKeyCreateRequest(BaseModel):
    """Issue an additional API key."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"name": "Laptop browser extension"}},
    )

    name: str = Field(..., min_length=1, max_length=255)
    expires_at: datetime | None = Field(
        default=None,
        alias="expiresAt",
        description="Optional expiry (ISO 8601 or Unix seconds)",
    )


class APIKeyCreateResponse(BaseModel):
    """A new key. The plaintext ``apiKey`` is only ever returned here."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(..., alias="apiKey", examples=["bkm_0123456789abcdef0123456789abcdef0123"])
    key_info: APIKeyInfo = Field(..., alias="keyInfo")


class RegisterResponse(BaseModel):
    """New account plus its first API key (shown once)."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserResponse
    api_key: str = Field(..., alias="apiKey")
