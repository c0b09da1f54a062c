"""
Remote api configuration.

Values come from keyword arguments or, via ``ApiConfig.from_env()``, from
environment variables:

- ``D2_API_BASE_URL``  base url of the api, e.g. ``https://play.example.org/api``
- ``D2_API_USERNAME``  basic auth user (optional)
- ``D2_API_PASSWORD``  basic auth password (optional)
- ``D2_API_TIMEOUT``   request timeout in seconds (default 30)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT = 30.0


class ApiConfig(BaseModel):
    """Connection settings for HttpApi."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Api base url")
    username: str | None = Field(default=None, description="Basic auth user")
    password: str | None = Field(default=None, description="Basic auth password")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Timeout in seconds")

    model_config = ConfigDict(frozen=True)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Paths are joined with a leading slash."""
        return v.rstrip("/")

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username is None:
            return None
        return (self.username, self.password or "")

    @classmethod
    def from_env(cls) -> ApiConfig:
        return cls(
            base_url=os.environ.get("D2_API_BASE_URL", DEFAULT_BASE_URL),
            username=os.environ.get("D2_API_USERNAME") or None,
            password=os.environ.get("D2_API_PASSWORD") or None,
            timeout=float(os.environ.get("D2_API_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )
