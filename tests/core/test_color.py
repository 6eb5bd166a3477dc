import pytest

from models.color import Color
from models.enums import ChannelID, StepArithmetic
from utils.colors import fraction_to_value, scale_channel, value_to_fraction


def test_fraction_round_trip_covers_every_value():
    for v in range(256):
        assert fraction_to_value(value_to_fraction(v)) == v


def test_hex_rendering_is_lowercase():
    assert Color(200, 93, 40).to_hex() == "#c85d28"
    assert str(Color(255, 171, 0)) == "#ffab00"
    assert Color.black().to_hex() == "#000000"


def test_from_hex():
    assert Color.from_hex("#c85d28") == Color(200, 93, 40)
    assert Color.from_hex("FFFFFF") == Color.white()

    with pytest.raises(ValueError):
        Color.from_hex("#fff")


@pytest.mark.parametrize("channels", [(256, 0, 0), (0, -1, 0), (0, 0, 1000)])
def test_out_of_range_channel_rejected(channels):
    with pytest.raises(ValueError):
        Color(*channels)


def test_non_int_channel_rejected():
    with pytest.raises(TypeError):
        Color(1.5, 0, 0)
    with pytest.raises(TypeError):
        Color(True, 0, 0)


def test_channel_access():
    color = Color(1, 2, 3)
    assert color.channel(ChannelID.RED) == 1
    assert color.channel(ChannelID.GREEN) == 2
    assert color.channel(ChannelID.BLUE) == 3
    assert color.with_channel(ChannelID.GREEN, 200) == Color(1, 200, 3)
    assert color == Color(1, 2, 3)  # original untouched


def test_lighter_wraps_around():
    assert Color(250, 250, 250).shifted(10) == Color(4, 4, 4)


def test_darker_wraps_around():
    assert Color(5, 0, 10).shifted(-10, StepArithmetic.WRAP) == Color(251, 246, 0)


def test_saturate_clamps():
    assert Color(250, 100, 0).shifted(10, StepArithmetic.SATURATE) == Color(255, 110, 10)
    assert Color(5, 100, 0).shifted(-10, StepArithmetic.SATURATE) == Color(0, 90, 0)


def test_scale_channel_truncates():
    assert scale_channel(200, 0x77) == 93
    assert scale_channel(200, 0x33) == 40
    assert scale_channel(255, 0x77) == 0x77
    assert scale_channel(1, 0x33) == 0


def test_to_dict():
    assert Color(200, 93, 40).to_dict() == {"r": 200, "g": 93, "b": 40, "hex": "#c85d28"}
