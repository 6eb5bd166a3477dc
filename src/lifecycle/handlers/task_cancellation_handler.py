from __future__ import annotations
import asyncio
from typing import List, Optional

from lifecycle.shutdown_protocol import IShutdownHandler
from lifecycle.task_registry import TaskRegistry
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class TaskCancellationHandler(IShutdownHandler):
    """
    Cancels and awaits every tracked task still running
    (pending query deliveries, leftover background work).

    Priority: 40
    """

    def __init__(
        self,
        registry: Optional[TaskRegistry] = None,
        exclude: Optional[List[asyncio.Task]] = None,
    ):
        self.registry = registry or TaskRegistry.instance()
        self.exclude = exclude or []

    @property
    def shutdown_priority(self) -> int:
        return 40

    async def shutdown(self) -> None:
        current = asyncio.current_task()
        tasks = [
            t for t in self.registry.get_tasks_for_shutdown(exclude=self.exclude)
            if t is not current
        ]
        if not tasks:
            log.debug("No tracked tasks left")
            return

        log.info(f"Cancelling {len(tasks)} tracked tasks...")
        for task in tasks:
            task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)
        log.debug(self.registry.summary())
