"""
pi-blaster device sink

Opens the pi-blaster FIFO (normally /dev/pi-blaster) read/write and keeps
it open for the process lifetime. When the FIFO is missing the daemon is
not running: it is started once and the open is retried once.
"""

from __future__ import annotations

import subprocess
from typing import BinaryIO, Callable, Optional, Sequence

from hardware.device.sink_interface import IDeviceSink
from models.errors import DeviceUnavailableError
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)

Opener = Callable[[str], BinaryIO]
Launcher = Callable[[Sequence[str], float], None]


class PiBlasterSink(IDeviceSink):

    def __init__(self, path: str, stream: BinaryIO):
        self._path = path
        self._stream = stream

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def write(self, data: bytes) -> None:
        self._stream.write(data)

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.close()
            log.info("Device sink closed", path=self._path)


def open_stream(path: str) -> BinaryIO:
    """Open the FIFO read/write, unbuffered so every command is its own write."""
    return open(path, "r+b", buffering=0)


def launch_daemon(command: Sequence[str], timeout: float) -> None:
    """
    Run the pi-blaster daemon command and wait for it to detach.

    Raises:
        OSError: Executable not found
        subprocess.SubprocessError: Non-zero exit or timeout
    """
    subprocess.run(list(command), check=True, timeout=timeout, capture_output=True)


def open_pi_blaster(
    path: str,
    daemon_command: Sequence[str],
    daemon_timeout: float = 10.0,
    opener: Optional[Opener] = None,
    launcher: Optional[Launcher] = None,
) -> PiBlasterSink:
    """
    Open the device, starting the daemon once if the FIFO does not exist.

    Raises:
        DeviceUnavailableError: Device still cannot be opened
    """
    opener = opener or open_stream
    launcher = launcher or launch_daemon

    try:
        stream = opener(path)
    except FileNotFoundError:
        log.warn("Device not found, starting daemon", path=path, command=" ".join(daemon_command))
        try:
            launcher(daemon_command, daemon_timeout)
        except (OSError, subprocess.SubprocessError) as ex:
            log.error("Daemon start failed", error=str(ex), error_type=type(ex).__name__)

        try:
            stream = opener(path)
        except OSError as ex:
            raise DeviceUnavailableError(path, str(ex)) from ex
    except OSError as ex:
        raise DeviceUnavailableError(path, str(ex)) from ex

    log.info("Device sink opened", path=path)
    return PiBlasterSink(path, stream)
