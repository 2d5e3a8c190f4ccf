"""Application config."""

from pydantic import Field

from s3gate.configs.base import BaseConfig
from s3gate.configs.cors import CORSConfig
from s3gate.configs.observability import ObservabilityConfig
from s3gate.configs.s3 import S3Config
from s3gate.configs.server import ServerConfig
from s3gate.configs.storage import StorageApiConfig


class AppConfig(BaseConfig):
    """s3gate config. `AppConfig.from_env()` is called once at startup."""

    s3: S3Config
    storage_api: StorageApiConfig = Field(default_factory=StorageApiConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
