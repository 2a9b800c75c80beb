"""Configuration management for the Tropipay client.

This module defines the ``Environment`` selector and the ``TropipayConfig``
model, plus helpers to load configuration from environment variables.
"""

import os
from enum import StrEnum
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

# Load variables from a local .env file for development convenience
load_dotenv()

TOKEN_PATH = "/access/token"


class Environment(StrEnum):
    """Deployment target of the Tropipay API."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        """Return the REST/GraphQL base URL for this environment."""
        return _BASE_URLS[self]

    @property
    def token_url(self) -> str:
        """Return the OAuth2 token endpoint for this environment."""
        return f"{self.base_url}{TOKEN_PATH}"


_BASE_URLS: dict[Environment, str] = {
    Environment.SANDBOX: "https://tropipay-dev.herokuapp.com/api/v2",
    Environment.PRODUCTION: "https://www.tropipay.com/api/v2",
}


class TropipayConfig(BaseModel):
    """Configuration values required to talk to the Tropipay API.

    The environment is fixed for the lifetime of a client; ``base_url`` and
    ``token_url`` only need to be set to point the client at a non-standard
    deployment (a local fake server, for example).
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)
    environment: Environment = Environment.SANDBOX
    timeout_ms: int = Field(default=10000, ge=1000, le=600000)
    verify_ssl: bool = True
    token_refresh_margin_seconds: int = Field(default=60, ge=0, le=3600)
    base_url_override: str | None = Field(default=None, alias="base_url")
    token_url_override: str | None = Field(default=None, alias="token_url")

    @model_validator(mode="after")
    def _validate_overrides(self) -> "TropipayConfig":
        for name, value in (("base_url", self.base_url_override), ("token_url", self.token_url_override)):
            if value is not None and not value.startswith(("http://", "https://")):
                msg = f"Invalid {name} {value!r}: expected an http(s) URL."
                raise ValueError(msg)
        return self

    @property
    def base_url(self) -> str:
        """Return the resolved base URL without a trailing slash."""
        return (self.base_url_override or self.environment.base_url).rstrip("/")

    @property
    def token_url(self) -> str:
        """Return the resolved token endpoint URL."""
        if self.token_url_override:
            return self.token_url_override
        if self.base_url_override:
            return f"{self.base_url}{TOKEN_PATH}"
        return self.environment.token_url

    @property
    def timeout_seconds(self) -> float:
        """Return the transport timeout in seconds."""
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls) -> "TropipayConfig":
        """Build a configuration object from environment variables."""
        client_id = os.getenv("TROPIPAY_CLIENT_ID")
        client_secret = os.getenv("TROPIPAY_CLIENT_SECRET")
        if not (client_id and client_secret):
            msg = "TROPIPAY_CLIENT_ID and TROPIPAY_CLIENT_SECRET are required to authenticate."
            raise RuntimeError(msg)
        raw_config: dict[str, Any] = {
            "client_id": client_id,
            "client_secret": client_secret,
            "environment": (os.getenv("TROPIPAY_ENVIRONMENT") or Environment.SANDBOX).lower(),
            "timeout_ms": os.getenv("TROPIPAY_TIMEOUT_MS"),
            "verify_ssl": os.getenv("TROPIPAY_VERIFY_SSL"),
            "token_refresh_margin_seconds": os.getenv("TROPIPAY_TOKEN_REFRESH_MARGIN"),
            "base_url": os.getenv("TROPIPAY_BASE_URL"),
            "token_url": os.getenv("TROPIPAY_TOKEN_URL"),
        }
        # Unset optional variables fall back to the model defaults
        raw_config = {key: value for key, value in raw_config.items() if value is not None}
        try:
            return cls(**raw_config)
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            msg = f"Invalid Tropipay configuration: {messages}"
            raise RuntimeError(msg) from exc


__all__ = ["Environment", "TropipayConfig"]
