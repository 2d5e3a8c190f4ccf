"""FastAPI storage endpoint plugin."""

from s3gate.configs.storage import StorageApiConfig
from s3gate.entrypoints.fastapi import FastAPIEntrypoint
from s3gate.entrypoints.plugins.abstract import AbstractEntrypointPlugin
from s3gate.web.storage.handlers.fastapi import build_storage_router


class FastAPIStoragePlugin(AbstractEntrypointPlugin[FastAPIEntrypoint]):
    """Mounts the storage endpoint.

    Needs `FastAPIDishkaPlugin` with a container providing `StorageService`.
    """

    def __init__(self, config: StorageApiConfig | None = None) -> None:
        self._config = config or StorageApiConfig()

    def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
        """Include the storage router into the app."""
        component.get_app().include_router(build_storage_router(self._config))
        return component
