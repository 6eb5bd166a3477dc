from .api_server_shutdown_handler import APIServerShutdownHandler
from .blaster_shutdown_handler import BlasterShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "APIServerShutdownHandler",
    "BlasterShutdownHandler",
    "TaskCancellationHandler",
]
