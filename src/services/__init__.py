"""Services layer"""

from .mailbox import Mailbox, ReplyChannel
from .color_transform import (
    ColorTransform,
    FadeTransform,
    GammaTransform,
    SetColorResult,
    create_transform,
    gamma_correct,
)
from .query_guard import QueryCompletionGuard
from .blaster import Blaster
from .action_service import ActionRequest, ActionService, parse_action, parse_channel_value
from .cooldown import Cooldown
from .service_container import ServiceContainer

__all__ = [
    "Mailbox",
    "ReplyChannel",
    "ColorTransform",
    "FadeTransform",
    "GammaTransform",
    "SetColorResult",
    "create_transform",
    "gamma_correct",
    "QueryCompletionGuard",
    "Blaster",
    "ActionRequest",
    "ActionService",
    "parse_action",
    "parse_channel_value",
    "Cooldown",
    "ServiceContainer",
]
