"""FastAPI entrypoint."""

import logging
from typing import Any, Self

from fastapi import FastAPI
from uvicorn import Config, Server

from s3gate.configs.server import ServerConfig
from s3gate.entrypoints.abstract import AbstractEntrypoint, EntrypointInconsistencyError
from s3gate.entrypoints.plugins.abstract import AbstractEntrypointPlugin

logger = logging.getLogger(__name__)


class FastAPIEntrypoint(AbstractEntrypoint):
    """FastAPI entrypoint implementation with plugin system.

    Example:
        ```python
        entrypoint = (
            FastAPIEntrypoint(app=FastAPI())
            .use_plugin(FastAPIDishkaPlugin(container))
            .use_plugin(FastAPIExceptionHandlersPlugin())
            .use_plugin(FastAPIStoragePlugin(storage_api_config))
        )

        async with entrypoint:
            await entrypoint.run()
        ```

    """

    def __init__(self, app: FastAPI, server_config: ServerConfig | None = None) -> None:
        """Initialize the FastAPI entrypoint.

        Args:
            app: The FastAPI application instance.
            server_config: Optional server configuration. If None, uses default configuration.

        """
        self._app = app
        self._server_config = server_config or ServerConfig()
        self._server: Server | None = None
        self._plugins: list[AbstractEntrypointPlugin[Self]] = []

    def use_plugin(self, plugin: AbstractEntrypointPlugin[Self]) -> Self:
        """Apply a plugin and keep it for the shutdown hooks.

        Args:
            plugin: The plugin to add and apply.

        Returns:
            Self for method chaining.

        """
        plugin.apply(self)
        self._plugins.append(plugin)
        return self

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app

    def get_plugin[T: AbstractEntrypointPlugin[Any]](self, plugin_type: type[T]) -> T | None:
        """Get the first applied plugin of the given type, if any."""
        for plugin in self._plugins:
            if isinstance(plugin, plugin_type):
                return plugin
        return None

    async def startup(self) -> None:
        """Startup the FastAPI entrypoint.

        Initializes the uvicorn server and prepares it for execution.
        """
        self._server = Server(Config(self._app, host=self._server_config.host, port=self._server_config.port))
        logger.info("Server configured on %s:%s", self._server_config.host, self._server_config.port)

    async def run(self, *args: Any, **kwargs: Any) -> None:
        """Run the FastAPI entrypoint.

        Starts the uvicorn server and serves the FastAPI application until cancelled.

        Raises:
            EntrypointInconsistencyError: If entrypoint was not started via startup().

        """
        if self._server is None:
            raise EntrypointInconsistencyError("FastAPI entrypoint must be started via startup() before run()")

        await self._server.serve(*args, **kwargs)

    async def shutdown(self) -> None:
        """Shutdown the FastAPI entrypoint.

        Calls the shutdown hooks of all plugins in reverse order.
        """
        for plugin in reversed(self._plugins):
            await plugin.on_shutdown(self)
        self._server = None
