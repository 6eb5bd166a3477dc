import io
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from hardware.device.pi_blaster_sink import PiBlasterSink, open_pi_blaster
from hardware.device.sink_factory import create_device_sink
from hardware.device.virtual_sink import VirtualDeviceSink
from models.config import DeviceConfig
from models.errors import DeviceUnavailableError


def test_open_existing_device_does_not_launch_daemon():
    stream = io.BytesIO()
    opener = MagicMock(return_value=stream)
    launcher = MagicMock()

    sink = open_pi_blaster("/dev/pi-blaster", ["pi-blaster"], opener=opener, launcher=launcher)

    assert isinstance(sink, PiBlasterSink)
    opener.assert_called_once_with("/dev/pi-blaster")
    launcher.assert_not_called()


def test_missing_device_launches_daemon_once_then_retries():
    stream = io.BytesIO()
    opener = MagicMock(side_effect=[FileNotFoundError("no fifo"), stream])
    launcher = MagicMock()

    sink = open_pi_blaster("/dev/pi-blaster", ["pi-blaster"], daemon_timeout=3.0, opener=opener, launcher=launcher)

    launcher.assert_called_once_with(["pi-blaster"], 3.0)
    assert opener.call_count == 2
    sink.write(b"17=1.000000\n")
    assert stream.getvalue() == b"17=1.000000\n"


def test_missing_device_after_launch_is_fatal():
    opener = MagicMock(side_effect=FileNotFoundError("no fifo"))
    launcher = MagicMock()

    with pytest.raises(DeviceUnavailableError) as exc:
        open_pi_blaster("/dev/pi-blaster", ["pi-blaster"], opener=opener, launcher=launcher)

    launcher.assert_called_once()
    assert opener.call_count == 2
    assert exc.value.details["path"] == "/dev/pi-blaster"


def test_failed_launch_still_retries_open_once():
    opener = MagicMock(side_effect=FileNotFoundError("no fifo"))
    launcher = MagicMock(side_effect=subprocess.CalledProcessError(1, ["pi-blaster"]))

    with pytest.raises(DeviceUnavailableError):
        open_pi_blaster("/dev/pi-blaster", ["pi-blaster"], opener=opener, launcher=launcher)

    launcher.assert_called_once()
    assert opener.call_count == 2


def test_permission_error_does_not_launch_daemon():
    opener = MagicMock(side_effect=PermissionError("denied"))
    launcher = MagicMock()

    with pytest.raises(DeviceUnavailableError):
        open_pi_blaster("/dev/pi-blaster", ["pi-blaster"], opener=opener, launcher=launcher)

    launcher.assert_not_called()


def test_pi_blaster_sink_close_is_idempotent():
    sink = PiBlasterSink("/dev/pi-blaster", io.BytesIO())
    sink.close()
    sink.close()
    assert sink.closed


def test_virtual_sink_records_commands():
    sink = VirtualDeviceSink()
    sink.write(b"17=0.500000\n")
    sink.write(b"22=1.000000\n")

    assert sink.commands() == [(17, 0.5), (22, 1.0)]
    assert sink.last_fraction(22) == 1.0
    with pytest.raises(KeyError):
        sink.last_fraction(27)


def test_virtual_sink_keeps_bounded_history():
    sink = VirtualDeviceSink(history=3)
    for value in range(5):
        sink.write(f"17=0.{value}00000\n".encode())

    assert sink.lines == ["17=0.200000", "17=0.300000", "17=0.400000"]
    assert sink.last_fraction(17) == 0.4


def test_factory_returns_virtual_sink_when_configured():
    sink = create_device_sink(DeviceConfig(virtual=True))
    assert isinstance(sink, VirtualDeviceSink)


def test_factory_off_pi_missing_device_is_fatal(tmp_path):
    missing = str(tmp_path / "pi-blaster")
    launcher = MagicMock()

    with patch("hardware.device.sink_factory.RuntimeInfo.is_raspberry_pi", return_value=False), \
            patch("hardware.device.pi_blaster_sink.launch_daemon", launcher):
        with pytest.raises(DeviceUnavailableError):
            create_device_sink(DeviceConfig(path=missing))

    launcher.assert_called_once_with(("pi-blaster",), 10.0)


def test_factory_opens_real_device_on_pi(tmp_path):
    fifo = tmp_path / "pi-blaster"
    fifo.write_bytes(b"")
    config = DeviceConfig(path=str(fifo))

    with patch("hardware.device.sink_factory.RuntimeInfo.is_raspberry_pi", return_value=True):
        sink = create_device_sink(config)

    try:
        assert isinstance(sink, PiBlasterSink)
        sink.write(b"17=0.000000\n")
    finally:
        sink.close()
    assert fifo.read_bytes() == b"17=0.000000\n"
