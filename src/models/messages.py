"""
Blaster messages

The only two things callers can ask of the blaster. SetColor is
fire-and-forget; QueryColor carries a one-shot reply channel that the
blaster answers at most once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from models.color import Color

if TYPE_CHECKING:
    from services.mailbox import ReplyChannel


@dataclass(frozen=True)
class SetColorMessage:
    target: Color


@dataclass(frozen=True)
class QueryColorMessage:
    reply: "ReplyChannel[Color]"
    caller: str = "unknown"
