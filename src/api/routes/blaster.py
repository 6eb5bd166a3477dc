"""
Blaster endpoints - the light's public HTTP surface

GET /do?action=set&r=&g=&b=   set explicit color
GET /do?action=off            all channels off
GET /do?action=lighter|darker step every channel by the configured amount
GET /color                    current color

Both answer with the resulting color as plain text "#rrggbb".
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse, PlainTextResponse

from api.dependencies import caller_id, get_service_container
from services.action_service import ActionRequest
from services.service_container import ServiceContainer
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

STATIC_DIR = Path(__file__).parent.parent.parent / "static"

router = APIRouter(tags=["Blaster"])


@router.get(
    "/do",
    response_class=PlainTextResponse,
    summary="Perform an action",
    responses={400: {"description": "Missing or unknown action"}},
)
async def do_action(
    request: Request,
    action: Optional[str] = Query(None, description="set | off | lighter | darker"),
    r: Optional[str] = Query(None, description="Red 0-255 (set only, invalid -> 0)"),
    g: Optional[str] = Query(None, description="Green 0-255 (set only, invalid -> 0)"),
    b: Optional[str] = Query(None, description="Blue 0-255 (set only, invalid -> 0)"),
    services: ServiceContainer = Depends(get_service_container),
) -> PlainTextResponse:
    """
    **Errors:**
    - 400: action missing or not one of set/off/lighter/darker
    - 503: blaster not running
    """
    action_request = ActionRequest.from_params(
        {"action": action, "r": r, "g": g, "b": b},
        caller=caller_id(request),
    )

    await services.cooldown.wait()
    color = await services.action_service.perform(action_request)

    log.info(f"/do {action_request.action.value}", caller=action_request.caller, color=color.to_hex())
    return PlainTextResponse(color.to_hex())


@router.get("/color", response_class=PlainTextResponse, summary="Current color")
async def current_color(
    request: Request,
    services: ServiceContainer = Depends(get_service_container),
) -> PlainTextResponse:
    color = await services.blaster.query_color(caller_id(request))
    return PlainTextResponse(color.to_hex())


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")
