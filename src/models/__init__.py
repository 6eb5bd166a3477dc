"""
Models package - Data models for the RGB blaster
"""

from .enums import ChannelID, ActionType, TransformPolicy, StepArithmetic, ReportedColor, LogLevel, LogCategory
from .color import Color
from .config import BlasterConfig, ChannelAssignment, DeviceConfig, ColorConfig, ApiConfig

__all__ = [
    'ChannelID',
    'ActionType',
    'TransformPolicy',
    'StepArithmetic',
    'ReportedColor',
    'LogLevel',
    'LogCategory',
    'Color',
    'BlasterConfig',
    'ChannelAssignment',
    'DeviceConfig',
    'ColorConfig',
    'ApiConfig',
]
