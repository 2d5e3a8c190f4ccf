"""Dishka config provider."""

from dishka import Provider, Scope, provide

from s3gate.configs.app import AppConfig
from s3gate.configs.s3 import S3Config
from s3gate.configs.storage import StorageApiConfig


class ConfigProvider(Provider):
    """Provides the application config and its sections.

    The config is built once at startup and handed to the provider, so every
    component reads the same immutable values.
    """

    def __init__(self, app_config: AppConfig) -> None:
        """Initialize the provider.

        Args:
            app_config: The application config.

        """
        super().__init__()
        self._app_config = app_config

    @provide(scope=Scope.APP)
    def app_config(self) -> AppConfig:
        """App config."""
        return self._app_config

    @provide(scope=Scope.APP)
    def s3_config(self, app_config: AppConfig) -> S3Config:
        """S3 config."""
        return app_config.s3

    @provide(scope=Scope.APP)
    def storage_api_config(self, app_config: AppConfig) -> StorageApiConfig:
        """Storage API config."""
        return app_config.storage_api
