"""
Query Completion Guard - bounded delivery of color replies

The blaster never waits for a caller to pick up its reply. Each reply is
handed over in its own tracked task bounded by `timeout`; a caller that
does not take it in time gets its reply channel closed, the fault is logged
and counted, and everything else keeps running.
"""

from __future__ import annotations

import asyncio

from lifecycle.task_registry import TaskCategory, create_tracked_task
from models.color import Color
from models.errors import QueryDeliveryTimeout, ReplyAbandonedError
from services.mailbox import ReplyChannel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.QUERY)


class QueryCompletionGuard:

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self.delivered = 0
        self.abandoned = 0

    def deliver(self, snapshot: Color, reply: ReplyChannel[Color], caller: str = "unknown") -> asyncio.Task:
        """Schedule delivery of snapshot and return immediately."""
        return create_tracked_task(
            self._deliver(snapshot, reply, caller),
            category=TaskCategory.QUERY,
            description=f"Color reply {snapshot.to_hex()} to {caller}",
        )

    async def _deliver(self, snapshot: Color, reply: ReplyChannel[Color], caller: str) -> bool:
        try:
            await asyncio.wait_for(reply.deliver(snapshot), timeout=self.timeout)
        except asyncio.TimeoutError:
            reply.close()
            self.abandoned += 1
            fault = QueryDeliveryTimeout(self.timeout)
            log.error(fault.message, caller=caller, color=snapshot.to_hex(), abandoned=self.abandoned)
            return False
        except ReplyAbandonedError:
            self.abandoned += 1
            log.warn("Reply channel closed before delivery", caller=caller)
            return False

        self.delivered += 1
        return True

    def stats(self) -> dict:
        return {
            "timeout": self.timeout,
            "delivered": self.delivered,
            "abandoned": self.abandoned,
        }
