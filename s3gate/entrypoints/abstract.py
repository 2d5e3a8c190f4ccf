"""Base entrypoint."""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self


class AbstractEntrypoint(ABC):
    """Abstract entrypoint.

    Lifecycle:
        1. startup() - Called before run() to validate configuration and initialize resources
        2. run() - Main execution method that runs the entrypoint
        3. shutdown() - Called after run() completes or is cancelled to cleanup resources

    """

    @abstractmethod
    async def startup(self) -> None:
        """Validate configuration and initialize resources."""

    @abstractmethod
    async def run(self) -> None:
        """Run the entrypoint."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Cleanup resources. Should be idempotent."""

    async def __aenter__(self) -> Self:
        """Enter context manager."""
        await self.startup()
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit context manager."""
        await self.shutdown()


class EntrypointInconsistencyError(Exception):
    """Entrypoint inconsistency error.

    Raised when an entrypoint is misconfigured or used out of order.
    """

    def __init__(self, message: str) -> None:
        """Initialize the entrypoint inconsistency error.

        Args:
            message: Error message describing the inconsistency.

        """
        super().__init__(message)
