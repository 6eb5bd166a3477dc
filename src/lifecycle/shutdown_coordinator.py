"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Waits for SIGINT/SIGTERM or for a critical task (API server, blaster loop)
to fail, then runs the registered shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Set

from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)

# A failure in any of these ends the process
CRITICAL_CATEGORIES: Set[str] = {"API", "ACTOR"}


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(APIServerShutdownHandler(api_server))
        coordinator.register(BlasterShutdownHandler(blaster))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(
        self,
        timeout_per_handler: float = 5.0,
        total_timeout: float = 15.0,
        registry: Optional[TaskRegistry] = None,
    ):
        self._handlers: List = []
        self._shutdown_event: Optional[asyncio.Event] = None
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self._registry = registry
        self.reason: Optional[str] = None

    @property
    def registry(self) -> TaskRegistry:
        return self._registry or TaskRegistry.instance()

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have a shutdown_priority property and an async shutdown().
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT and SIGTERM handlers on the running loop."""
        self._shutdown_event = asyncio.Event()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.request_shutdown(s.name))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        if self.reason is None:
            self.reason = reason
        log.info(f"Shutdown requested: {reason}")
        self._shutdown_event.set()

    # ----------------------------------------------------------------------
    # Critical task monitoring
    # ----------------------------------------------------------------------

    def _critical_tasks(self) -> List[asyncio.Task]:
        return [
            r.task for r in self.registry.active()
            if r.info.category.name in CRITICAL_CATEGORIES
        ]

    def _check_critical_failures(self) -> bool:
        for record in self.registry.failed():
            if record.info.category.name in CRITICAL_CATEGORIES:
                log.error(
                    f"Critical task failed: {record.info.description}",
                    task_category=record.info.category.name,
                    error=str(record.finished_with_error),
                )
                self.reason = f"Task failure: {record.info.description}"
                return True
        return False

    async def _wait_once(self) -> None:
        """Wait until the shutdown event fires or one critical task finishes."""
        critical = self._critical_tasks()
        if not critical:
            try:
                await asyncio.wait_for(self._shutdown_event.wait(), timeout=0.2)
            except asyncio.TimeoutError:
                pass
            return

        waiter = asyncio.create_task(self._shutdown_event.wait())
        try:
            await asyncio.wait({waiter, *critical}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Critical tasks stay alive, only the waiter is ours
            if not waiter.done():
                waiter.cancel()

    async def wait_for_shutdown(self) -> None:
        """
        Return once a signal arrives or a critical task has failed.

        Raises:
            RuntimeError: If signal handlers weren't set up
        """
        if self._shutdown_event is None:
            raise RuntimeError("Call setup_signal_handlers() first")

        while not self._shutdown_event.is_set():
            if self._check_critical_failures():
                return
            await self._wait_once()

        log.debug("Shutdown triggered by signal handler")

    # ----------------------------------------------------------------------
    # Shutdown sequence
    # ----------------------------------------------------------------------

    async def shutdown_all(self) -> None:
        """
        Run every handler, highest priority first.

        Each handler gets timeout_per_handler; the whole sequence stops
        starting new handlers after total_timeout. A failing handler is
        logged and the sequence continues.
        """
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in handlers:
            name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"{name} shutdown complete")
            except asyncio.TimeoutError:
                log.error(f"{name} shutdown timeout ({self._timeout_per_handler}s)")
            except Exception as e:
                log.error(f"Error shutting down {name}: {e}", exc_info=True)

        log.info("Shutdown sequence complete")

    def get_handler(self, handler_type: type):
        for handler in self._handlers:
            if isinstance(handler, handler_type):
                return handler
        return None
