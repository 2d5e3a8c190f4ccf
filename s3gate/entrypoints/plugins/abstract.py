"""Abstract plugin protocol."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3gate.entrypoints.abstract import AbstractEntrypoint


class AbstractEntrypointPlugin[T_Entrypoint: AbstractEntrypoint](ABC):
    """Abstract entrypoint plugin.

    Plugins are applied once, when added to the entrypoint, and get a chance
    to release resources when the entrypoint shuts down.
    """

    @abstractmethod
    def apply(self, component: T_Entrypoint) -> T_Entrypoint:
        """Apply the plugin to the entrypoint.

        Args:
            component: The entrypoint to configure.

        Returns:
            The configured entrypoint.

        """

    async def on_shutdown(self, component: T_Entrypoint) -> None:
        """Release resources acquired by the plugin."""
