"""
System endpoints - Task introspection, health, and blaster diagnostics
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any, List
from datetime import datetime, timezone

from api.dependencies import get_service_container
from api.schemas.blaster import BlasterStatusResponse, ChannelPins
from hardware.device.virtual_sink import VirtualDeviceSink
from lifecycle.task_registry import TaskRecord, TaskRegistry
from models.errors import BlasterError
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


def _task_status(r: TaskRecord) -> str:
    if not r.task.done():
        return "running"
    if r.cancelled:
        return "cancelled"
    if r.finished_with_error:
        return "failed"
    return "completed"


def _task_dict(r: TaskRecord) -> Dict[str, Any]:
    return {
        "id": r.info.id,
        "category": r.info.category.name,
        "description": r.info.description,
        "created_at": r.info.created_at,
        "finished_at": r.finished_at,
        "status": _task_status(r),
        "error": str(r.finished_with_error) if r.finished_with_error else None,
    }


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    """
    High-level task summary.

    Finished tasks are only kept up to the registry history limit, so
    totals count what is still tracked.
    """
    registry = TaskRegistry.instance()
    return {
        "summary": registry.summary(),
        "total": len(registry.list_all()),
        "active": len(registry.active()),
        "failed": len(registry.failed()),
        "cancelled": len(registry.cancelled())
    }


@router.get("/tasks")
async def get_all_tasks() -> Dict[str, Any]:
    tasks = [_task_dict(r) for r in TaskRegistry.instance().list_all()]
    return {"count": len(tasks), "tasks": tasks}


@router.get("/tasks/active")
async def get_active_tasks() -> Dict[str, Any]:
    """
    Currently running tasks, oldest first.

    Useful for spotting query deliveries stuck on a slow caller.
    """
    now = datetime.now(timezone.utc).timestamp()
    tasks: List[Dict[str, Any]] = []

    for r in TaskRegistry.instance().active():
        entry = _task_dict(r)
        entry["running_for_seconds"] = round(now - r.info.created_timestamp, 2)
        tasks.append(entry)

    tasks.sort(key=lambda t: t["created_at"])
    return {"count": len(tasks), "tasks": tasks}


@router.get("/tasks/failed")
async def get_failed_tasks() -> Dict[str, Any]:
    tasks = []
    for r in TaskRegistry.instance().failed():
        entry = _task_dict(r)
        entry["error_type"] = type(r.finished_with_error).__name__
        tasks.append(entry)
    return {"count": len(tasks), "tasks": tasks}


@router.get("/health")
async def health_check(services: ServiceContainer = Depends(get_service_container)) -> Dict[str, Any]:
    """
    App health status.

    degraded: blaster not running, background task failures, or query
    replies abandoned by callers.
    """
    registry = TaskRegistry.instance()
    failed = registry.failed()
    blaster = services.blaster

    status = "healthy"
    reasons = []

    if not blaster.running:
        reasons.append("blaster is not running")
    if failed:
        reasons.append(f"{len(failed)} background task(s) have failed")
    if blaster.guard.abandoned:
        reasons.append(f"{blaster.guard.abandoned} color replies abandoned")
    if reasons:
        status = "degraded"

    return {
        "status": status,
        "reason": "; ".join(reasons) or None,
        "blaster": {
            "running": blaster.running,
            "sets_handled": blaster.sets_handled,
            "queries_handled": blaster.queries_handled,
        },
        "tasks": {
            "total": len(registry.list_all()),
            "active": len(registry.active()),
            "failed": len(failed),
            "cancelled": len(registry.cancelled()),
        },
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/blaster", response_model=BlasterStatusResponse, summary="Blaster actor state")
async def blaster_status(services: ServiceContainer = Depends(get_service_container)) -> BlasterStatusResponse:
    blaster = services.blaster
    config = services.config

    color = None
    if blaster.running:
        try:
            color = (await blaster.query_color("system/blaster")).to_hex()
        except BlasterError as ex:
            log.warn("Color query for diagnostics failed", error=ex.message)

    return BlasterStatusResponse(
        color=color,
        pins=ChannelPins(
            red=config.channels.red,
            green=config.channels.green,
            blue=config.channels.blue,
        ),
        device=blaster.writer.sink.path,
        virtual=isinstance(blaster.writer.sink, VirtualDeviceSink),
        **blaster.stats(),
    )
