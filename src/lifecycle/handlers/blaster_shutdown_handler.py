from __future__ import annotations
from typing import TYPE_CHECKING

from lifecycle.shutdown_protocol import IShutdownHandler
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.blaster import Blaster

log = get_logger().for_category(LogCategory.SHUTDOWN)


class BlasterShutdownHandler(IShutdownHandler):
    """
    Stops the blaster message loop and closes the device sink.

    The light keeps its last color; pi-blaster holds the PWM state.

    Priority: 80 (after the API server, before generic task cancellation)
    """

    def __init__(self, blaster: "Blaster"):
        self.blaster = blaster

    @property
    def shutdown_priority(self) -> int:
        return 80

    async def shutdown(self) -> None:
        log.info("Stopping blaster...")
        await self.blaster.stop()
