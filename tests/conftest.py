"""
Shared fixtures: virtual device, writer and a running blaster.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import pytest_asyncio

from hardware.device.device_writer import DeviceWriter
from hardware.device.virtual_sink import VirtualDeviceSink
from lifecycle.task_registry import TaskRegistry
from models.config import ChannelAssignment
from services.blaster import Blaster
from services.color_transform import GammaTransform
from services.query_guard import QueryCompletionGuard


@pytest.fixture(autouse=True)
def fresh_task_registry():
    """Every test gets its own TaskRegistry singleton"""
    TaskRegistry.reset()
    yield TaskRegistry.instance()
    TaskRegistry.reset()


@pytest.fixture
def channels():
    return ChannelAssignment(red=17, green=22, blue=27)


@pytest.fixture
def sink():
    return VirtualDeviceSink()


@pytest.fixture
def writer(sink, channels):
    return DeviceWriter(sink, channels)


@pytest_asyncio.fixture
async def blaster(writer):
    """Gamma blaster with a short query timeout, started and stopped around the test"""
    instance = Blaster(writer, GammaTransform(), QueryCompletionGuard(timeout=0.1))
    instance.start()
    yield instance
    await instance.stop()
