from unittest.mock import MagicMock, patch

import pytest

import main_asyncio
from hardware.device.virtual_sink import VirtualDeviceSink
from models.config import BlasterConfig, ColorConfig, DeviceConfig
from models.enums import StepArithmetic, TransformPolicy
from models.errors import DeviceUnavailableError


def test_build_services_wires_configuration():
    config = BlasterConfig(
        color=ColorConfig(policy=TransformPolicy.FADE, step_arithmetic=StepArithmetic.SATURATE, step_size=5),
        query_timeout=2.0,
    )
    services = main_asyncio.build_services(config, VirtualDeviceSink())

    assert services.config is config
    assert services.blaster.stats()["policy"] == "fade"
    assert services.blaster.guard.timeout == 2.0
    assert services.action_service.arithmetic == StepArithmetic.SATURATE
    assert services.action_service.step_size == 5
    assert services.cooldown.interval_s == pytest.approx(0.01)


@pytest.mark.asyncio
async def test_missing_device_halts_startup(tmp_path):
    config = BlasterConfig(device=DeviceConfig(path=str(tmp_path / "pi-blaster")))
    launcher = MagicMock()

    with patch.object(main_asyncio.ConfigManager, "load", return_value=config), \
            patch("hardware.device.sink_factory.RuntimeInfo.is_raspberry_pi", return_value=False), \
            patch("hardware.device.pi_blaster_sink.launch_daemon", launcher):
        code = await main_asyncio.main()

    assert code == main_asyncio.EXIT_DEVICE_UNAVAILABLE
    launcher.assert_called_once()


@pytest.mark.asyncio
async def test_invalid_configuration_halts_startup():
    with patch.object(main_asyncio.ConfigManager, "load", side_effect=ValueError("channels: bad")):
        code = await main_asyncio.main()
    assert code == main_asyncio.EXIT_BAD_CONFIG


def test_device_unavailable_error_is_fatal_status():
    assert DeviceUnavailableError("/dev/pi-blaster", "gone").status_code == 503
