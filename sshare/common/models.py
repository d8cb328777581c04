"""
Pydantic models for upload configuration and remote responses.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sshare.common.exceptions import InvalidConfigError


class UploadConfig(BaseModel):
    """Settings for a single upload to a PUT-style store.

    Instances are frozen; every ``with_*`` call returns a modified copy.
    """

    model_config = ConfigDict(frozen=True)

    filename: str = "authorized_keys"
    max_downloads: int = 10
    max_days: int = 2
    password: str | None = None

    def with_filename(self, filename: str) -> UploadConfig:
        return self.model_copy(update={"filename": filename})

    def with_max_downloads(self, max_downloads: int) -> UploadConfig:
        return self.model_copy(update={"max_downloads": max_downloads})

    def with_max_days(self, max_days: int) -> UploadConfig:
        return self.model_copy(update={"max_days": max_days})

    def with_password(self, password: str | None) -> UploadConfig:
        return self.model_copy(update={"password": password or None})


class UploadResult(BaseModel):
    """Locator and delete credential of an uploaded file."""

    model_config = ConfigDict(frozen=True)

    locator: str = Field(min_length=1)
    delete_credential: str = Field(min_length=1)

    @property
    def delete_url(self) -> str:
        return f"{self.locator.rstrip('/')}/{self.delete_credential}"


class PasteConfig(BaseModel):
    endpoint_base: str = "https://pastebin.com"
    dev_token: str = Field(default="", validate_default=True)
    user_key: str | None = None
    folder_key: str | None = None

    @field_validator("dev_token")
    @classmethod
    def validate_dev_token(cls, value: str) -> str:
        if not value:
            msg = "must provide a pastebin developer token"
            raise InvalidConfigError(msg)
        return value


class GitHubKey(BaseModel):
    id: int
    key: str
    title: str = ""


class Publication(BaseModel):
    """Where shared text can be fetched from, whichever store holds it."""

    model_config = ConfigDict(frozen=True)

    locator: str
    raw_locator: str | None = None
    delete_credential: str | None = None
