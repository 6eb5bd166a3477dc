"""
Hardware Layer

Low-level access to the pi-blaster PWM daemon:

- IDeviceSink: byte-stream sink (real FIFO or in-memory virtual)
- DeviceWriter: "<pin>=<fraction>" command formatting
- create_device_sink: picks the sink for the current runtime
"""
from .device import (
    IDeviceSink,
    PiBlasterSink,
    VirtualDeviceSink,
    DeviceWriter,
    create_device_sink,
)

__all__ = [
    "IDeviceSink",
    "PiBlasterSink",
    "VirtualDeviceSink",
    "DeviceWriter",
    "create_device_sink",
]
