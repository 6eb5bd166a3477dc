"""
Enums for the RGB blaster
"""

from enum import Enum, auto


class ChannelID(Enum):
    """Logical color channels of the light"""
    RED = auto()
    GREEN = auto()
    BLUE = auto()


class ActionType(Enum):
    """
    Actions accepted by /do

    SET: Set explicit r/g/b
    OFF: All channels to zero
    LIGHTER: Current color + 10 per channel
    DARKER: Current color - 10 per channel
    """
    SET = "set"
    OFF = "off"
    LIGHTER = "lighter"
    DARKER = "darker"


class TransformPolicy(Enum):
    """How a requested color reaches the device"""
    GAMMA = auto()    # Instant set with per-channel correction
    FADE = auto()     # One unit step per tick toward target


class StepArithmetic(Enum):
    """Overflow behaviour of lighter/darker"""
    WRAP = auto()      # 8-bit wraparound (250 + 10 -> 4)
    SATURATE = auto()  # Clamp to 0..255


class ReportedColor(Enum):
    """Which color the actor keeps as authoritative"""
    CORRECTED = auto()  # What the hardware was told
    REQUESTED = auto()  # What the caller asked for


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    HARDWARE = auto()    # Device sink, daemon launch
    STATE = auto()       # Authoritative color changes
    COLOR = auto()       # Transform policies
    ACTOR = auto()       # Blaster message loop
    QUERY = auto()       # Query reply delivery
    SYSTEM = auto()      # Startup, shutdown, errors
    API = auto()

    SHUTDOWN = auto()
    LIFECYCLE = auto()
    TASK = auto()

    GENERAL = auto()    # Default general category
