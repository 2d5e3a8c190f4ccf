"""Server config."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseSettings):
    """Uvicorn server configuration, read from `SERVER_`-prefixed variables."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Interface to bind.")  # noqa: S104
    port: int = Field(default=8000, ge=1, le=65535, description="Port to bind.")
