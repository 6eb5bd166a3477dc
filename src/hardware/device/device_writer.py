"""
DeviceWriter - formats and emits pi-blaster channel commands

One line per channel update, "<pin>=<fraction>\\n", no batching.

Used by:
- Blaster: initial sync of the authoritative color
- ColorTransform policies: every channel write of a SetColor
"""

from __future__ import annotations
from typing import Dict

from hardware.device.sink_interface import IDeviceSink
from models.color import Color
from models.config import ChannelAssignment
from models.enums import ChannelID
from models.errors import BlasterError, ChannelValueError, DeviceWriteError
from utils.colors import CHANNEL_MAX, value_to_fraction
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


def format_command(pin: int, fraction: float) -> str:
    """Format one command line, fraction printed with six decimals"""
    return f"{pin}={fraction:f}\n"


class DeviceWriter:

    def __init__(self, sink: IDeviceSink, channels: ChannelAssignment):
        self._sink = sink
        self.channels = channels
        self.writes = 0

    @property
    def sink(self) -> IDeviceSink:
        return self._sink

    def write(self, pin: int, fraction: float) -> None:
        """
        Write fraction of full intensity to pin.

        Raises:
            ChannelValueError: fraction outside 0.0-1.0
            DeviceWriteError: sink write failed
        """
        if not 0.0 <= fraction <= 1.0:
            raise ChannelValueError(pin, fraction, "0.0-1.0")

        command = format_command(pin, fraction)
        try:
            self._sink.write(command.encode("ascii"))
        except OSError as ex:
            raise DeviceWriteError(pin, str(ex)) from ex

        self.writes += 1
        log.debug("Channel written", pin=pin, fraction=f"{fraction:f}")

    def write_channel(self, pin: int, value: int) -> None:
        """
        Write 8-bit channel value to pin.

        Raises:
            ChannelValueError: value outside 0-255
            DeviceWriteError: sink write failed
        """
        if not isinstance(value, int) or not 0 <= value <= CHANNEL_MAX:
            raise ChannelValueError(pin, value)
        self.write(pin, value_to_fraction(value))

    def write_color(self, color: Color) -> Dict[ChannelID, BlasterError]:
        """Write all three channels; returns the errors of channels that failed."""
        errors: Dict[ChannelID, BlasterError] = {}
        for channel, pin in self.channels.items():
            try:
                self.write_channel(pin, color.channel(channel))
            except BlasterError as ex:
                errors[channel] = ex
        return errors

    def close(self) -> None:
        self._sink.close()
