"""
Mailbox and ReplyChannel - message passing primitives for the blaster

Mailbox is a rendezvous channel: send() returns only once the receiving
task has taken the message, so two messages sent one after another by the
same caller are taken in that order even across different mailboxes.

ReplyChannel is a one-shot reply: deliver() waits until the receiver has
taken the value. A channel closed before that point answers late receivers
with ReplyAbandonedError.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, Optional, TypeVar

from models.errors import ReplyAbandonedError

T = TypeVar("T")

_ABANDONED = object()


@dataclass
class _Envelope(Generic[T]):
    message: T
    taken: asyncio.Future


class Mailbox(Generic[T]):
    """
    FIFO rendezvous mailbox.

    Several mailboxes may share one `signal` event so a single receiver can
    wait for mail on any of them.

    Example:
        signal = asyncio.Event()
        inbox = Mailbox("set", signal)

        # sender
        await inbox.send(message)

        # receiver
        await signal.wait()
        message = inbox.take_nowait()
    """

    def __init__(self, name: str, signal: Optional[asyncio.Event] = None):
        self.name = name
        self.signal = signal or asyncio.Event()
        self._envelopes: Deque[_Envelope[T]] = deque()

    async def send(self, message: T) -> None:
        """Queue a message and wait until the receiver takes it."""
        envelope = _Envelope(message, asyncio.get_running_loop().create_future())
        self._envelopes.append(envelope)
        self.signal.set()
        # Cancelling the sender cancels `taken`; take_nowait() then skips it
        await envelope.taken

    def has_mail(self) -> bool:
        return any(not e.taken.done() for e in self._envelopes)

    def take_nowait(self) -> Optional[T]:
        """Take the oldest message still wanted by its sender, or None."""
        while self._envelopes:
            envelope = self._envelopes.popleft()
            if envelope.taken.done():
                continue
            envelope.taken.set_result(None)
            return envelope.message
        return None

    def reject_all(self, exc: BaseException) -> int:
        """Fail every waiting sender with exc. Returns how many were rejected."""
        rejected = 0
        while self._envelopes:
            envelope = self._envelopes.popleft()
            if not envelope.taken.done():
                envelope.taken.set_exception(exc)
                rejected += 1
        return rejected

    def __len__(self) -> int:
        return sum(1 for e in self._envelopes if not e.taken.done())


class ReplyChannel(Generic[T]):
    """One-shot reply destination for a query."""

    def __init__(self) -> None:
        self._value: asyncio.Future = asyncio.get_running_loop().create_future()
        self._taken = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def delivered(self) -> bool:
        return self._taken.is_set()

    async def deliver(self, value: T) -> None:
        """
        Hand value to the receiver and wait until it is taken.

        Raises:
            ReplyAbandonedError: Channel already closed or already used
        """
        if self._closed or self._value.done():
            raise ReplyAbandonedError()
        self._value.set_result(value)
        await self._taken.wait()

    async def receive(self) -> T:
        """
        Wait for the value.

        Raises:
            ReplyAbandonedError: Delivery was abandoned before we got here
        """
        value = await self._value
        if self._closed or value is _ABANDONED:
            raise ReplyAbandonedError()
        self._taken.set()
        return value

    def close(self) -> None:
        """Abandon the reply. Later receive() calls raise ReplyAbandonedError."""
        if self._taken.is_set():
            return
        self._closed = True
        if not self._value.done():
            self._value.set_result(_ABANDONED)
