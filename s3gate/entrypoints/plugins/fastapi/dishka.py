"""FastAPI Dishka plugin."""

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka as setup_dishka_fastapi

from s3gate.entrypoints.fastapi import FastAPIEntrypoint
from s3gate.entrypoints.plugins.abstract import AbstractEntrypointPlugin


class FastAPIDishkaPlugin(AbstractEntrypointPlugin[FastAPIEntrypoint]):
    """Plugin for adding Dishka dependency injection to FastAPI entrypoints.

    The container is closed on shutdown, which closes the shared httpx client.

    Example:
        ```python
        from dishka import make_async_container

        container = make_async_container(ConfigProvider(config), S3Provider())
        entrypoint = FastAPIEntrypoint(app=app).use_plugin(FastAPIDishkaPlugin(container))
        ```

    """

    def __init__(self, container: AsyncContainer) -> None:
        """Initialize the Dishka plugin.

        Args:
            container: The Dishka async container instance.

        """
        self._container = container

    def get_container(self) -> AsyncContainer:
        """Get the Dishka container instance."""
        return self._container

    def apply(self, component: FastAPIEntrypoint) -> FastAPIEntrypoint:
        """Apply Dishka to the entrypoint.

        Args:
            component: The FastAPI entrypoint to configure.

        Returns:
            The configured entrypoint.

        """
        setup_dishka_fastapi(self._container, component.get_app())
        return component

    async def on_shutdown(self, component: FastAPIEntrypoint) -> None:
        """Close the container."""
        await self._container.close()
