from __future__ import annotations
from collections import deque
from typing import Deque, List, Tuple

from hardware.device.sink_interface import IDeviceSink

DEFAULT_HISTORY = 1000


class VirtualDeviceSink(IDeviceSink):
    """In-memory sink keeping the most recent `history` command lines."""

    def __init__(self, path: str = "virtual://pi-blaster", history: int = DEFAULT_HISTORY):
        self._path = path
        self._closed = False
        self._lines: Deque[str] = deque(maxlen=history)

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def lines(self) -> List[str]:
        """Recorded command lines, oldest first"""
        return list(self._lines)

    def write(self, data: bytes) -> None:
        if self._closed:
            raise OSError("write to closed virtual sink")
        self._lines.extend(data.decode("ascii").splitlines())

    def close(self) -> None:
        self._closed = True

    def commands(self) -> List[Tuple[int, float]]:
        """Parsed (pin, fraction) pairs in write order"""
        parsed = []
        for line in self._lines:
            pin, fraction = line.split("=", 1)
            parsed.append((int(pin), float(fraction)))
        return parsed

    def last_fraction(self, pin: int) -> float:
        for p, fraction in reversed(self.commands()):
            if p == pin:
                return fraction
        raise KeyError(pin)
