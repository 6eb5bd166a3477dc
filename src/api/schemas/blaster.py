"""
Blaster schemas - diagnostics returned by /api/v1/system/blaster
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict


class ChannelPins(BaseModel):
    red: int
    green: int
    blue: int


class SetColorResultResponse(BaseModel):
    requested: str = Field(description="Color the caller asked for (#rrggbb)")
    written: str = Field(description="Last values sent to the device")
    applied: str = Field(description="Authoritative color after the set")
    errors: Dict[str, str] = Field(default_factory=dict, description="Failed channels")


class QueryDeliveryStats(BaseModel):
    timeout: float
    delivered: int
    abandoned: int


class BlasterStatusResponse(BaseModel):
    """Blaster actor state"""
    running: bool
    color: Optional[str] = Field(None, description="Current color, None when not running")
    policy: str
    pins: ChannelPins
    device: str
    virtual: bool
    sets_handled: int
    queries_handled: int
    handler_errors: int
    pending_sets: int
    pending_queries: int
    device_writes: int
    last_result: Optional[SetColorResultResponse] = None
    query_delivery: QueryDeliveryStats
