"""
Shutdown handler protocol for component-based graceful shutdown.
"""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    Protocol for components that need graceful shutdown.

    The ShutdownCoordinator calls shutdown() on each handler, highest
    shutdown_priority first.

    Example:
        class BlasterShutdownHandler:
            @property
            def shutdown_priority(self) -> int:
                return 80

            async def shutdown(self) -> None:
                await self.blaster.stop()
    """

    @property
    def shutdown_priority(self) -> int:
        """Higher priority shuts down earlier."""
        ...

    async def shutdown(self) -> None:
        ...
