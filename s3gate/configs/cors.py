"""CORS config."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOW_HEADERS = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
]


class CORSConfig(BaseSettings):
    """CORS config, read from `CORS_`-prefixed variables.

    Browser clients call the storage endpoint directly, so the defaults allow
    any origin with the methods and headers they send.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origins: list[str] = Field(
        description=(
            "The origins to allow in the request. "
            "See https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Headers/Access-Control-Allow-Origin "
            "for more information."
        ),
        default_factory=lambda: ["*"],
    )
    allow_methods: list[str] = Field(
        description=(
            "The methods to allow in the request. "
            "See https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Headers/Access-Control-Allow-Methods "
            "for more information."
        ),
        default_factory=lambda: ["GET", "POST", "OPTIONS"],
    )
    allow_headers: list[str] = Field(
        description=(
            "The headers to allow in the request. "
            "See https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Headers/Access-Control-Allow-Headers "
            "for more information."
        ),
        default_factory=lambda: list(DEFAULT_ALLOW_HEADERS),
    )
    allow_credentials: bool = Field(
        description=(
            "Whether to allow credentials in the request. "
            "See https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Headers/Access-Control-Allow-Credentials "
            "for more information."
        ),
        default=False,
    )
    max_age: int = Field(
        description=(
            "The maximum age of the preflight request in seconds. "
            "See https://developer.mozilla.org/en-US/docs/Web/HTTP/Reference/Headers/Access-Control-Max-Age "
            "for more information."
        ),
        default=600,
    )
