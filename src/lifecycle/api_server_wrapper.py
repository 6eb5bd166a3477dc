from __future__ import annotations
import asyncio
import uvicorn
from fastapi import FastAPI
from typing import Optional
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class APIServerWrapper:
    """
    Runs uvicorn inside the application loop without uvicorn's own signal
    handlers, so SIGINT/SIGTERM reach the ShutdownCoordinator.

    start() serves until stop() is called; schedule it with
    create_tracked_task(category=TaskCategory.API).
    """

    def __init__(self, app: FastAPI, host: str = "0.0.0.0", port: int = 1337):
        self.app = app
        self.host = host
        self.port = port
        self._server: Optional[uvicorn.Server] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._stop_event: asyncio.Event = asyncio.Event()

    # ----------------------------------------------------------------------
    # INTERNAL
    # ----------------------------------------------------------------------
    def _create_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            loop="asyncio",
            log_level="warning",
            access_log=False,
            server_header=False,
        )
        server = uvicorn.Server(config)
        server.install_signal_handlers = lambda: None  # type: ignore
        return server

    # ----------------------------------------------------------------------
    # PUBLIC API
    # ----------------------------------------------------------------------
    async def start(self) -> None:
        """
        Start uvicorn and block until stop() is called.

        Raises:
            RuntimeError: Already started, or uvicorn exited on its own
                (e.g. the port could not be bound)
        """
        if self.is_running:
            raise RuntimeError("API server already started")

        self._server = self._create_server()
        self._stop_event.clear()

        log.info(f"Launching API server on http://{self.host}:{self.port}")
        self._serve_task = asyncio.create_task(self._server.serve(), name="UvicornServe")
        stop_waiter = asyncio.create_task(self._stop_event.wait())

        try:
            await asyncio.wait({self._serve_task, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            log.debug("start() cancelled externally, invoking stop()")
            await self.stop()
            raise
        finally:
            if not stop_waiter.done():
                stop_waiter.cancel()

        if not self._stop_event.is_set():
            # uvicorn returned without stop(): treat as failure of the API task
            self._serve_task = None
            self._server = None
            raise RuntimeError(f"API server exited unexpectedly (port {self.port})")

    async def stop(self, *, shutdown_timeout: float = 2.0) -> None:
        """Stop the API server and release the port."""
        self._stop_event.set()

        if self._server is None:
            log.debug("API server stop() called but server was not running")
            return

        log.info("Stopping API server...")
        self._server.should_exit = True
        self._server.force_exit = True

        if self._serve_task and not self._serve_task.done():
            try:
                await asyncio.wait_for(self._serve_task, timeout=shutdown_timeout)
            except asyncio.TimeoutError:
                log.warn("API server did not exit in time, cancelling")
                self._serve_task.cancel()
                try:
                    await self._serve_task
                except asyncio.CancelledError:
                    log.debug("Uvicorn serve task cancelled")

        self._server = None
        self._serve_task = None
        log.info("API server stopped")

    # ----------------------------------------------------------------------
    # PROPERTIES
    # ----------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._serve_task
