# hardware/device/sink_interface.py
"""
IDeviceSink Protocol
====================
Byte-stream sink accepting pi-blaster commands.
"""

from __future__ import annotations
from typing import Protocol


class IDeviceSink(Protocol):
    """
    Minimal contract for the device stream.

    - path: where the sink lives (for logs and diagnostics)
    - write: push raw bytes, raising OSError on failure
    - close: release the handle
    """

    @property
    def path(self) -> str:
        ...

    @property
    def closed(self) -> bool:
        ...

    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...
