"""
Action Service - turns /do requests into blaster messages

One dispatcher over the closed ActionType enum:
- set:     SetColor(r, g, b)
- off:     SetColor(black)
- lighter: QueryColor, then SetColor(current + step)
- darker:  QueryColor, then SetColor(current - step)

Every action finishes with a QueryColor so the caller gets the color the
light actually ended up with.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from models.color import Color
from models.enums import ActionType, StepArithmetic
from models.errors import InvalidActionError
from services.blaster import Blaster
from utils.colors import CHANNEL_MAX
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.STATE)

_UNSIGNED = re.compile(r"[0-9]+")


def parse_action(value: Optional[str]) -> ActionType:
    """
    Raises:
        InvalidActionError: Missing or unknown action name
    """
    try:
        return ActionType(value)
    except ValueError:
        raise InvalidActionError(value, [a.value for a in ActionType]) from None


def parse_channel_value(value: Optional[str]) -> int:
    """Unsigned decimal 0-255; anything else (missing, signed, too big, garbage) is 0"""
    if value is None or not _UNSIGNED.fullmatch(value):
        return 0
    number = int(value)
    return number if number <= CHANNEL_MAX else 0


@dataclass(frozen=True)
class ActionRequest:
    action: ActionType
    color: Color = field(default_factory=Color.black)
    caller: str = "unknown"

    @classmethod
    def from_params(cls, params: Mapping[str, Optional[str]], caller: str = "unknown") -> "ActionRequest":
        action = parse_action(params.get("action"))
        color = Color.black()
        if action == ActionType.SET:
            color = Color(
                parse_channel_value(params.get("r")),
                parse_channel_value(params.get("g")),
                parse_channel_value(params.get("b")),
            )
        return cls(action=action, color=color, caller=caller)


class ActionService:

    def __init__(
        self,
        blaster: Blaster,
        arithmetic: StepArithmetic = StepArithmetic.WRAP,
        step_size: int = 10,
    ):
        self.blaster = blaster
        self.arithmetic = arithmetic
        self.step_size = step_size

    async def perform(self, request: ActionRequest) -> Color:
        """Run the action and return the resulting current color."""
        action = request.action

        if action == ActionType.SET:
            await self.blaster.set_color(request.color)
        elif action == ActionType.OFF:
            await self.blaster.set_color(Color.black())
        elif action in (ActionType.LIGHTER, ActionType.DARKER):
            delta = self.step_size if action == ActionType.LIGHTER else -self.step_size
            current = await self.blaster.query_color(request.caller)
            await self.blaster.set_color(current.shifted(delta, self.arithmetic))

        result = await self.blaster.query_color(request.caller)
        log.debug(f"Action {action.value} done", caller=request.caller, color=result.to_hex())
        return result
