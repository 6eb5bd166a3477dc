# sink_factory.py

from hardware.device.sink_interface import IDeviceSink
from hardware.device.pi_blaster_sink import open_pi_blaster
from hardware.device.virtual_sink import VirtualDeviceSink
from models.config import DeviceConfig
from runtime.runtime_info import RuntimeInfo
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


def create_device_sink(config: DeviceConfig) -> IDeviceSink:
    """
    Virtual sink only when device.virtual is set; otherwise the real
    pi-blaster FIFO.

    Raises:
        DeviceUnavailableError: FIFO missing after one daemon start (fatal)
    """
    if config.virtual:
        log.info("Using virtual device sink (configured)")
        return VirtualDeviceSink()

    if not RuntimeInfo.is_raspberry_pi():
        log.warn(
            "Not running on a Raspberry Pi, set device.virtual: true for development",
            path=config.path,
        )

    return open_pi_blaster(
        config.path,
        config.daemon_command,
        daemon_timeout=config.daemon_timeout,
    )
