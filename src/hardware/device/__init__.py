from .sink_interface import IDeviceSink
from .pi_blaster_sink import PiBlasterSink, open_pi_blaster
from .virtual_sink import VirtualDeviceSink
from .device_writer import DeviceWriter, format_command
from .sink_factory import create_device_sink

__all__ = [
    "IDeviceSink",
    "PiBlasterSink",
    "open_pi_blaster",
    "VirtualDeviceSink",
    "DeviceWriter",
    "format_command",
    "create_device_sink",
]
