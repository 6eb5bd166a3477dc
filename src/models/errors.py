"""
Error types for the blaster core and its HTTP adapter

Every error carries a machine-readable code and the HTTP status the API
layer answers with when the error reaches a request handler.
"""

from typing import Optional


class BlasterError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class DeviceUnavailableError(BlasterError):
    """Device sink cannot be opened (daemon not running)"""
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="DEVICE_UNAVAILABLE",
            message=f"Device '{path}' unavailable: {reason}",
            details={"path": path, "reason": reason},
            status_code=503
        )


class DeviceWriteError(BlasterError):
    """Write to the device sink failed"""
    def __init__(self, pin: int, reason: str):
        super().__init__(
            code="DEVICE_WRITE_FAILED",
            message=f"Write to pin {pin} failed: {reason}",
            details={"pin": pin, "reason": reason},
            status_code=503
        )


class ChannelValueError(BlasterError):
    """Channel value outside the device range"""
    def __init__(self, pin: int, value, valid_range: str = "0-255"):
        super().__init__(
            code="CHANNEL_VALUE_OUT_OF_RANGE",
            message=f"Value {value} for pin {pin} is outside {valid_range}",
            details={"pin": pin, "value": value, "valid_range": valid_range},
            status_code=422
        )


class QueryDeliveryTimeout(BlasterError):
    """Caller did not take its color reply in time"""
    def __init__(self, timeout: float):
        super().__init__(
            code="QUERY_DELIVERY_TIMEOUT",
            message=f"Requested color reply blocked for more than {timeout}s",
            details={"timeout": timeout},
            status_code=504
        )


class ReplyAbandonedError(BlasterError):
    """Reply channel was closed before the value was taken"""
    def __init__(self):
        super().__init__(
            code="REPLY_ABANDONED",
            message="Color reply was abandoned before it was received",
            status_code=504
        )


class InvalidActionError(BlasterError):
    """Action name is missing or not supported"""
    def __init__(self, action: Optional[str], valid_actions: list):
        super().__init__(
            code="INVALID_ACTION",
            message=f"Action '{action}' is not supported",
            details={
                "action": action,
                "valid_actions": valid_actions
            },
            status_code=400
        )


class ActorNotRunningError(BlasterError):
    """Blaster message loop is not running"""
    def __init__(self):
        super().__init__(
            code="BLASTER_NOT_RUNNING",
            message="Blaster is not running. Device may still be starting.",
            status_code=503
        )
