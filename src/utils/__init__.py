"""
Utility functions for the RGB blaster
"""

from .colors import (
    clamp_channel,
    value_to_fraction,
    fraction_to_value,
    scale_channel,
)

__all__ = [
    'clamp_channel',
    'value_to_fraction',
    'fraction_to_value',
    'scale_channel',
]
