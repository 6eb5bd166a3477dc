"""
main_asyncio.py - Application entry point for the RGB blaster
-------------------------------------------------------------

Responsible for:
- loading configuration
- opening the pi-blaster device (auto-starting the daemon once)
- wiring the blaster, services and HTTP API
- graceful shutdown on Ctrl+C, SIGTERM or a failed critical task
"""

import sys

# ---------------------------------------------------------------------------
# UTF-8 ENCODING FIX (important for Raspberry Pi)
# ---------------------------------------------------------------------------

if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio

from api.main import create_app
from hardware.device import DeviceWriter, IDeviceSink, create_device_sink
from lifecycle import APIServerWrapper, ShutdownCoordinator
from lifecycle.handlers import APIServerShutdownHandler, BlasterShutdownHandler, TaskCancellationHandler
from lifecycle.task_registry import create_tracked_task, TaskCategory
from managers import ConfigManager
from models.color import Color
from models.config import BlasterConfig
from models.enums import LogCategory, LogLevel
from models.errors import DeviceUnavailableError
from services import ActionService, Blaster, Cooldown, QueryCompletionGuard, ServiceContainer, create_transform
from utils.logger import get_logger, configure_logger

# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------

log = get_logger().for_category(LogCategory.SYSTEM)

EXIT_DEVICE_UNAVAILABLE = 1
EXIT_BAD_CONFIG = 2


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def build_services(config: BlasterConfig, sink: IDeviceSink) -> ServiceContainer:
    """Assemble blaster and services around an already opened sink."""
    writer = DeviceWriter(sink, config.channels)
    blaster = Blaster(
        writer,
        create_transform(config.color),
        QueryCompletionGuard(config.query_timeout),
    )
    return ServiceContainer(
        config=config,
        blaster=blaster,
        action_service=ActionService(
            blaster,
            arithmetic=config.color.step_arithmetic,
            step_size=config.color.step_size,
        ),
        cooldown=Cooldown(config.api.cooldown_ms / 1000.0),
    )


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main() -> int:
    """Main async entry point. Returns the process exit code."""

    log.info("Starting RGB blaster...")

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager()
    try:
        config = config_manager.load()
    except ValueError as ex:
        log.error(f"Invalid configuration: {ex}")
        return EXIT_BAD_CONFIG

    configure_logger(LogLevel[config.log_level])

    # ========================================================================
    # 2. DEVICE
    # ========================================================================

    try:
        sink = create_device_sink(config.device)
    except DeviceUnavailableError as ex:
        log.error(ex.message, **ex.details)
        return EXIT_DEVICE_UNAVAILABLE

    # ========================================================================
    # 3. BLASTER + SERVICES
    # ========================================================================

    services = build_services(config, sink)
    blaster = services.blaster
    blaster.start()
    await blaster.set_color(Color.black())

    # ========================================================================
    # 4. API SERVER
    # ========================================================================

    app = create_app(services, cors_origins=config.api.cors_origins)
    api_server = APIServerWrapper(app, host=config.api.host, port=config.api.port)
    create_tracked_task(
        api_server.start(),
        category=TaskCategory.API,
        description="FastAPI/Uvicorn Server"
    )

    # ========================================================================
    # 5. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(APIServerShutdownHandler(api_server))
    coordinator.register(BlasterShutdownHandler(blaster))
    coordinator.register(TaskCancellationHandler())

    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Application initialized. Waiting for exit signal...")

    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    log.info("RGB blaster shut down cleanly.")
    return 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run() -> None:
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    run()
