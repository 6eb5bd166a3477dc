"""
Channel conversion utilities

Pure functions converting between 8-bit channel values and the 0.0-1.0
fraction expected by pi-blaster.
"""

CHANNEL_MAX = 255


def clamp_channel(value: int) -> int:
    """Clamp an integer into 0-255"""
    return max(0, min(CHANNEL_MAX, int(value)))


def value_to_fraction(value: int) -> float:
    """
    Convert channel value (0-255) to fraction of full intensity

    Example:
        value_to_fraction(255)  # 1.0
        value_to_fraction(200)  # 0.784313...
    """
    return value / float(CHANNEL_MAX)


def fraction_to_value(fraction: float) -> int:
    """
    Convert fraction (0.0-1.0) back to the nearest channel value

    Inverse of value_to_fraction for every value in 0-255.
    """
    return round(fraction * CHANNEL_MAX)


def scale_channel(value: int, numerator: int, denominator: int = CHANNEL_MAX) -> int:
    """
    Scale channel value by numerator/denominator, truncating toward zero

    Integer arithmetic, so the result is the exact floor.
    """
    return (value * numerator) // denominator
