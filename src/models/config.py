"""
Configuration models - Parsed, validated configuration

ConfigManager turns the YAML data into these frozen dataclasses.
They are read-only after startup.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from models.enums import ChannelID, ReportedColor, StepArithmetic, TransformPolicy


@dataclass(frozen=True)
class ChannelAssignment:
    """Logical channel -> GPIO pin driven by pi-blaster"""
    red: int = 17
    green: int = 22
    blue: int = 27

    def __post_init__(self):
        pins = [self.red, self.green, self.blue]
        for pin in pins:
            if not isinstance(pin, int) or isinstance(pin, bool) or pin < 0:
                raise ValueError(f"Invalid GPIO pin: {pin!r}")
        if len(set(pins)) != len(pins):
            raise ValueError(f"GPIO pins must be distinct, got {pins}")

    def pin_for(self, channel: ChannelID) -> int:
        if channel == ChannelID.RED:
            return self.red
        if channel == ChannelID.GREEN:
            return self.green
        return self.blue

    def items(self) -> List[Tuple[ChannelID, int]]:
        """(channel, pin) in red, green, blue order"""
        return [
            (ChannelID.RED, self.red),
            (ChannelID.GREEN, self.green),
            (ChannelID.BLUE, self.blue),
        ]


@dataclass(frozen=True)
class DeviceConfig:
    path: str = "/dev/pi-blaster"
    daemon_command: Tuple[str, ...] = ("pi-blaster",)
    daemon_timeout: float = 10.0
    virtual: bool = False


@dataclass(frozen=True)
class ColorConfig:
    policy: TransformPolicy = TransformPolicy.GAMMA
    fade_step_delay_ms: float = 0.0
    step_arithmetic: StepArithmetic = StepArithmetic.WRAP
    step_size: int = 10
    reported: ReportedColor = ReportedColor.CORRECTED


@dataclass(frozen=True)
class ApiConfig:
    host: str = "0.0.0.0"
    port: int = 1337
    cooldown_ms: int = 10
    cors_origins: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BlasterConfig:
    """Root configuration object"""
    channels: ChannelAssignment = field(default_factory=ChannelAssignment)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    color: ColorConfig = field(default_factory=ColorConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    query_timeout: float = 5.0
    log_level: str = "INFO"

    def summary(self) -> Dict[str, object]:
        return {
            "pins": f"r={self.channels.red} g={self.channels.green} b={self.channels.blue}",
            "device": self.device.path,
            "virtual": self.device.virtual,
            "policy": self.color.policy.name,
            "arithmetic": self.color.step_arithmetic.name,
        }
