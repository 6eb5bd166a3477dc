"""
Blaster - single owner of the pi-blaster device and the current color

All access goes through two mailboxes:
- set:   SetColorMessage(target), the sender resumes once it is taken
- query: QueryColorMessage(reply), answered through QueryCompletionGuard

One message is handled at a time. When both mailboxes hold mail the next
one is picked at random; within a mailbox order is FIFO. Because sends are
rendezvous, a query sent after a set by the same caller sees that set.

The message loop is the only code that writes to the device or changes the
authoritative color, so neither needs a lock.

Example:
    blaster = Blaster(writer, GammaTransform(), QueryCompletionGuard(5.0))
    blaster.start()

    await blaster.set_color(Color(200, 200, 200))
    color = await blaster.query_color()   # Color(200, 93, 40)
"""

from __future__ import annotations

import asyncio
import random
from typing import Optional, Union

from hardware.device.device_writer import DeviceWriter
from lifecycle.task_registry import TaskCategory, create_tracked_task
from models.color import Color
from models.errors import ActorNotRunningError
from models.messages import QueryColorMessage, SetColorMessage
from services.color_transform import ColorTransform, SetColorResult
from services.mailbox import Mailbox, ReplyChannel
from services.query_guard import QueryCompletionGuard
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ACTOR)

Message = Union[SetColorMessage, QueryColorMessage]


class Blaster:

    def __init__(
        self,
        writer: DeviceWriter,
        transform: ColorTransform,
        guard: QueryCompletionGuard,
        initial: Optional[Color] = None,
        rng: Optional[random.Random] = None,
    ):
        self._writer = writer
        self._transform = transform
        self._guard = guard
        self._color = initial or Color.black()
        self._rng = rng or random.Random()

        self._signal = asyncio.Event()
        self._set_box: Mailbox[SetColorMessage] = Mailbox("set", self._signal)
        self._query_box: Mailbox[QueryColorMessage] = Mailbox("query", self._signal)

        self._task: Optional[asyncio.Task] = None
        self.last_result: Optional[SetColorResult] = None
        self.sets_handled = 0
        self.queries_handled = 0
        self.handler_errors = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def guard(self) -> QueryCompletionGuard:
        return self._guard

    @property
    def writer(self) -> DeviceWriter:
        return self._writer

    def start(self) -> asyncio.Task:
        if self.running:
            raise RuntimeError("Blaster already running")
        self._task = create_tracked_task(
            self.run(),
            category=TaskCategory.ACTOR,
            description="Blaster message loop",
        )
        return self._task

    async def stop(self) -> None:
        """Stop the message loop, fail waiting senders and close the device."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        rejected = self._set_box.reject_all(ActorNotRunningError())
        rejected += self._query_box.reject_all(ActorNotRunningError())
        if rejected:
            log.warn("Pending messages rejected on stop", count=rejected)

        self._writer.close()
        log.info("Blaster stopped", sets=self.sets_handled, queries=self.queries_handled)

    # ------------------------------------------------------------------
    # Caller API
    # ------------------------------------------------------------------

    def _ensure_running(self) -> None:
        if not self.running:
            raise ActorNotRunningError()

    async def set_color(self, color: Color) -> None:
        """
        Request a color change. Returns once the blaster has taken the request.

        Raises:
            ActorNotRunningError: Message loop not started or stopped
        """
        self._ensure_running()
        await self._set_box.send(SetColorMessage(color))

    async def query_color(self, caller: str = "unknown") -> Color:
        """
        Return the current authoritative color.

        Raises:
            ActorNotRunningError: Message loop not started or stopped
            ReplyAbandonedError: Reply was not picked up in time
        """
        self._ensure_running()
        reply: ReplyChannel[Color] = ReplyChannel()
        await self._query_box.send(QueryColorMessage(reply, caller))
        return await reply.receive()

    # ------------------------------------------------------------------
    # Message loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        log.info("Blaster started", color=self._color.to_hex(), policy=self._transform.name)
        self._sync_device()

        while True:
            ready = [box for box in (self._set_box, self._query_box) if box.has_mail()]
            if not ready:
                self._signal.clear()
                await self._signal.wait()
                continue

            message = self._rng.choice(ready).take_nowait()
            if message is not None:
                await self._handle(message)

    def _sync_device(self) -> None:
        """Make the hardware match the initial color."""
        errors = self._writer.write_color(self._color)
        for channel, ex in errors.items():
            log.error("Initial channel write failed", channel=channel.name, error=ex.message)

    async def _handle(self, message: Message) -> None:
        try:
            if isinstance(message, SetColorMessage):
                await self._handle_set(message)
            else:
                self._handle_query(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.handler_errors += 1
            log.error(f"Message handling failed: {e}", kind=type(message).__name__, exc_info=True)

    async def _handle_set(self, message: SetColorMessage) -> None:
        result = await self._transform.apply(self._writer, self._color, message.target)
        self._color = result.applied
        self.last_result = result
        self.sets_handled += 1

        if result.ok:
            log.info("Color applied", requested=result.requested.to_hex(), applied=result.applied.to_hex())
        else:
            log.warn(
                "Color partially applied",
                requested=result.requested.to_hex(),
                applied=result.applied.to_hex(),
                failed=", ".join(channel.name for channel in result.errors),
            )

    def _handle_query(self, message: QueryColorMessage) -> None:
        self.queries_handled += 1
        self._guard.deliver(self._color, message.reply, message.caller)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def stats(self) -> dict:
        return {
            "running": self.running,
            "policy": self._transform.name,
            "sets_handled": self.sets_handled,
            "queries_handled": self.queries_handled,
            "handler_errors": self.handler_errors,
            "pending_sets": len(self._set_box),
            "pending_queries": len(self._query_box),
            "device_writes": self._writer.writes,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "query_delivery": self._guard.stats(),
        }
