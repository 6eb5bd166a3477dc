"""
Color model - Immutable RGB triple

Represents both a requested target and the authoritative state of the light.
Each channel is an 8-bit intensity (0-255).
"""

from dataclasses import dataclass, replace
from typing import Tuple

from utils.colors import CHANNEL_MAX, clamp_channel
from .enums import ChannelID, StepArithmetic


@dataclass(frozen=True)
class Color:
    """
    Unified color representation

    Examples:
        color = Color.from_rgb(200, 93, 40)
        str(color)                 # "#c85d28"
        color.channel(ChannelID.GREEN)  # 93

        # lighter/darker
        color = color.shifted(10, StepArithmetic.WRAP)
    """

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"Channel {name} must be int, got {type(value).__name__}")
            if not 0 <= value <= CHANNEL_MAX:
                raise ValueError(f"Channel {name}={value} is outside the valid range of 0-255")

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        return cls(r, g, b)

    @classmethod
    def from_hex(cls, value: str) -> 'Color':
        """
        Parse "#rrggbb" (leading # optional)

        Raises:
            ValueError: If the string is not 6 hex digits
        """
        text = value[1:] if value.startswith("#") else value
        if len(text) != 6:
            raise ValueError(f"Expected 6 hex digits, got '{value}'")
        return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))

    @staticmethod
    def black() -> 'Color':
        return Color(0, 0, 0)

    @staticmethod
    def white() -> 'Color':
        return Color(CHANNEL_MAX, CHANNEL_MAX, CHANNEL_MAX)

    # === ACCESS ===

    def to_rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    def channel(self, channel: ChannelID) -> int:
        """Return the intensity of a single channel"""
        if channel == ChannelID.RED:
            return self.r
        if channel == ChannelID.GREEN:
            return self.g
        return self.b

    def with_channel(self, channel: ChannelID, value: int) -> 'Color':
        """Return a copy with one channel replaced"""
        if channel == ChannelID.RED:
            return replace(self, r=value)
        if channel == ChannelID.GREEN:
            return replace(self, g=value)
        return replace(self, b=value)

    # === ADJUSTMENTS ===

    def shifted(self, delta: int, arithmetic: StepArithmetic = StepArithmetic.WRAP) -> 'Color':
        """
        Add delta to every channel

        WRAP follows unsigned 8-bit arithmetic (250 + 10 -> 4, 5 - 10 -> 251).
        SATURATE clamps into 0-255.
        """
        if arithmetic == StepArithmetic.WRAP:
            return Color(*((v + delta) & 0xFF for v in self.to_rgb()))
        return Color(*(clamp_channel(v + delta) for v in self.to_rgb()))

    # === SERIALIZATION ===

    def to_hex(self) -> str:
        """Lowercase "#rrggbb" """
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_dict(self) -> dict:
        return {"r": self.r, "g": self.g, "b": self.b, "hex": self.to_hex()}

    def __str__(self) -> str:
        return self.to_hex()
