"""Storage API config."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageApiConfig(BaseSettings):
    """Storage HTTP endpoint configuration.

    Attributes:
        route_path (str): Path of the single storage endpoint.
        default_list_limit (int): Page size when a list request gives none.
        max_list_limit (int): Largest page size a caller may request.

    """

    model_config = SettingsConfigDict(env_prefix="STORAGE_API_", extra="ignore")

    route_path: str = Field(default="/storage", description="Path of the single storage endpoint.")
    default_list_limit: int = Field(default=200, ge=1, description="Page size when a list request gives none.")
    max_list_limit: int = Field(default=1000, ge=1, description="Largest page size a caller may request.")
