import pytest

from hardware.device.device_writer import DeviceWriter
from hardware.device.virtual_sink import VirtualDeviceSink
from models.color import Color
from models.config import ColorConfig
from models.enums import ChannelID, ReportedColor, TransformPolicy
from models.errors import ChannelValueError, DeviceWriteError
from services.color_transform import (
    FadeTransform,
    GammaTransform,
    SetColorResult,
    create_transform,
    gamma_correct,
)


class FailingPinSink(VirtualDeviceSink):
    """Virtual sink whose writes to one pin always fail"""

    def __init__(self, pin: int):
        super().__init__()
        self.pin = pin

    def write(self, data: bytes) -> None:
        if data.startswith(f"{self.pin}=".encode()):
            raise OSError("device gone")
        super().write(data)


class RejectingPinWriter(DeviceWriter):
    """Writer that refuses every value for one pin"""

    def __init__(self, sink, channels, pin: int):
        super().__init__(sink, channels)
        self.pin = pin

    def write_channel(self, pin: int, value: int) -> None:
        if pin == self.pin:
            raise ChannelValueError(pin, value)
        super().write_channel(pin, value)


def test_gamma_correct():
    assert gamma_correct(Color(200, 200, 200)) == Color(200, 93, 40)
    assert gamma_correct(Color(255, 255, 255)) == Color(255, 119, 51)
    assert gamma_correct(Color.black()) == Color.black()


@pytest.mark.asyncio
async def test_gamma_writes_corrected_values(writer, sink):
    result = await GammaTransform().apply(writer, Color.black(), Color(200, 200, 200))

    assert result.ok
    assert result.requested == Color(200, 200, 200)
    assert result.written == Color(200, 93, 40)
    assert result.applied.to_hex() == "#c85d28"
    assert sink.lines == ["17=0.784314", "22=0.364706", "27=0.156863"]


@pytest.mark.asyncio
async def test_gamma_reporting_requested_color(writer):
    transform = GammaTransform(reported=ReportedColor.REQUESTED)
    result = await transform.apply(writer, Color.black(), Color(200, 200, 200))

    assert result.written == Color(200, 93, 40)
    assert result.applied == Color(200, 200, 200)


@pytest.mark.asyncio
async def test_gamma_io_failure_still_applies_channel(channels):
    writer = DeviceWriter(FailingPinSink(channels.green), channels)
    current = Color(1, 2, 3)

    result = await GammaTransform().apply(writer, current, Color(255, 255, 255))

    assert not result.ok
    assert list(result.errors) == [ChannelID.GREEN]
    assert isinstance(result.errors[ChannelID.GREEN], DeviceWriteError)
    assert result.applied == Color(255, 119, 51)


@pytest.mark.asyncio
async def test_gamma_rejected_value_keeps_previous_value(channels):
    writer = RejectingPinWriter(VirtualDeviceSink(), channels, channels.blue)
    current = Color(1, 2, 3)

    result = await GammaTransform().apply(writer, current, Color(255, 255, 255))

    assert list(result.errors) == [ChannelID.BLUE]
    assert isinstance(result.errors[ChannelID.BLUE], ChannelValueError)
    assert result.applied == Color(255, 119, 3)
    assert writer.sink.lines == ["17=1.000000", "22=0.466667"]


@pytest.mark.asyncio
async def test_fade_steps_one_unit_per_tick(writer, sink):
    result = await FadeTransform().apply(writer, Color(0, 0, 0), Color(3, 1, 0))

    assert result.ok
    assert result.applied == Color(3, 1, 0)
    # tick 1: r and g move, tick 2-3: only r
    pins_and_values = [(pin, round(f * 255)) for pin, f in sink.commands()]
    assert pins_and_values == [(17, 1), (22, 1), (17, 2), (17, 3)]


@pytest.mark.asyncio
async def test_fade_down_reaches_target_exactly(writer, sink):
    result = await FadeTransform().apply(writer, Color(10, 5, 7), Color(0, 5, 9))

    assert result.applied == Color(0, 5, 9)
    assert sink.last_fraction(17) == 0.0
    assert round(sink.last_fraction(27) * 255) == 9
    assert all(pin != 22 for pin, _ in sink.commands())


@pytest.mark.asyncio
async def test_fade_to_same_color_writes_nothing(writer, sink):
    result = await FadeTransform().apply(writer, Color(9, 9, 9), Color(9, 9, 9))
    assert result.applied == Color(9, 9, 9)
    assert sink.lines == []


@pytest.mark.asyncio
async def test_fade_is_best_effort_on_write_failure(channels):
    sink = FailingPinSink(channels.blue)
    writer = DeviceWriter(sink, channels)

    result = await FadeTransform().apply(writer, Color.black(), Color(2, 2, 2))

    assert result.applied == Color(2, 2, 2)
    assert list(result.errors) == [ChannelID.BLUE]
    assert all(pin != channels.blue for pin, _ in sink.commands())


def test_create_transform_from_config():
    assert isinstance(create_transform(ColorConfig()), GammaTransform)

    fade = create_transform(ColorConfig(policy=TransformPolicy.FADE, fade_step_delay_ms=5))
    assert isinstance(fade, FadeTransform)
    assert fade.step_delay_s == pytest.approx(0.005)


def test_result_to_dict():
    result = SetColorResult(
        requested=Color(200, 200, 200),
        written=Color(200, 93, 40),
        applied=Color(200, 93, 40),
        errors={ChannelID.RED: DeviceWriteError(17, "gone")},
    )
    assert result.to_dict() == {
        "requested": "#c8c8c8",
        "written": "#c85d28",
        "applied": "#c85d28",
        "errors": {"RED": "Write to pin 17 failed: gone"},
    }
