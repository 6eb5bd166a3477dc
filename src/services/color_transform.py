"""
Color transform policies - turn a requested color into device writes

Runs only inside the Blaster actor. Each policy writes through the
DeviceWriter and reports what happened as a SetColorResult; channel errors
are collected as values and never raised out of apply().

Policies:
- GammaTransform: instantaneous set, green and blue scaled down so the
  three LEDs look balanced (red x1, green x119/255, blue x51/255)
- FadeTransform: steps every channel one unit per tick toward the target
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Protocol

from hardware.device.device_writer import DeviceWriter
from models.color import Color
from models.config import ColorConfig
from models.enums import ChannelID, ReportedColor, TransformPolicy
from models.errors import BlasterError, ChannelValueError, DeviceWriteError
from utils.colors import scale_channel
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.COLOR)

GREEN_GAMMA = 0x77
BLUE_GAMMA = 0x33


@dataclass(frozen=True)
class SetColorResult:
    """
    Outcome of one SetColor handling.

    requested: color the caller asked for
    written: last values sent to the device
    applied: new authoritative color
    errors: failed channels (empty on full success)
    """
    requested: Color
    written: Color
    applied: Color
    errors: Dict[ChannelID, BlasterError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "requested": self.requested.to_hex(),
            "written": self.written.to_hex(),
            "applied": self.applied.to_hex(),
            "errors": {channel.name: ex.message for channel, ex in self.errors.items()},
        }


class ColorTransform(Protocol):
    """Policy applied by the actor for every SetColor message"""

    name: str

    async def apply(self, writer: DeviceWriter, current: Color, target: Color) -> SetColorResult:
        ...


def gamma_correct(color: Color) -> Color:
    """(200, 200, 200) -> (200, 93, 40); integer math, truncated toward zero"""
    return Color(
        color.r,
        scale_channel(color.g, GREEN_GAMMA),
        scale_channel(color.b, BLUE_GAMMA),
    )


# ============================================================
# GAMMA
# ============================================================

class GammaTransform:
    """
    Instantaneous gamma-corrected set.

    A channel whose value is rejected keeps its previous authoritative
    value. An I/O failure is recorded but the channel still applies.
    """

    name = "gamma"

    def __init__(self, reported: ReportedColor = ReportedColor.CORRECTED):
        self.reported = reported

    async def apply(self, writer: DeviceWriter, current: Color, target: Color) -> SetColorResult:
        corrected = gamma_correct(target)
        source = corrected if self.reported == ReportedColor.CORRECTED else target

        applied = current
        errors: Dict[ChannelID, BlasterError] = {}

        for channel, pin in writer.channels.items():
            try:
                writer.write_channel(pin, corrected.channel(channel))
            except ChannelValueError as ex:
                errors[channel] = ex
                log.error("Channel value rejected", channel=channel.name, pin=pin, error=ex.message)
                continue
            except DeviceWriteError as ex:
                errors[channel] = ex
                log.error("Channel write failed", channel=channel.name, pin=pin, error=ex.message)
            applied = applied.with_channel(channel, source.channel(channel))

        return SetColorResult(requested=target, written=corrected, applied=applied, errors=errors)


# ============================================================
# FADE
# ============================================================

class FadeTransform:
    """
    Gradual fade from the current color to the target.

    Every tick moves each channel that has not arrived yet by one unit and
    writes it. Write failures are logged once per channel; the authoritative
    color becomes the target regardless.
    """

    name = "fade"

    def __init__(self, step_delay_s: float = 0.0):
        self.step_delay_s = step_delay_s

    async def apply(self, writer: DeviceWriter, current: Color, target: Color) -> SetColorResult:
        errors: Dict[ChannelID, BlasterError] = {}
        position = current
        ticks = 0

        while position != target:
            for channel, pin in writer.channels.items():
                value = position.channel(channel)
                goal = target.channel(channel)
                if value == goal:
                    continue

                value += 1 if goal > value else -1
                position = position.with_channel(channel, value)

                try:
                    writer.write_channel(pin, value)
                except BlasterError as ex:
                    if channel not in errors:
                        errors[channel] = ex
                        log.error("Fade write failed", channel=channel.name, pin=pin, error=ex.message)

            ticks += 1
            if self.step_delay_s > 0:
                await asyncio.sleep(self.step_delay_s)

        log.debug("Fade complete", target=target.to_hex(), ticks=ticks)
        return SetColorResult(requested=target, written=target, applied=target, errors=errors)


def create_transform(config: ColorConfig) -> ColorTransform:
    if config.policy == TransformPolicy.FADE:
        return FadeTransform(step_delay_s=config.fade_step_delay_ms / 1000.0)
    return GammaTransform(reported=config.reported)
