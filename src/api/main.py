"""
FastAPI Application Factory

Assembles the HTTP surface of the blaster:
- Blaster routes (/do, /color, index page) at the root, where existing
  callers expect them
- Static assets under /static
- System diagnostics under /api/v1/system
- Exception handlers turning BlasterError into JSON error bodies

The ServiceContainer is stored on app.state, so tests can build an app
around their own blaster.
"""
import sys
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from typing import Optional, Sequence

from api.routes import blaster, system
from api.routes.blaster import STATIC_DIR
from api.middleware.error_handler import register_exception_handlers
from services.service_container import ServiceContainer
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    services: Optional[ServiceContainer] = None,
    title: str = "RGB Blaster",
    description: str = "HTTP control for a pi-blaster RGB light",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: Optional[Sequence[str]] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        services: ServiceContainer for the endpoints (may be set later on app.state.services)
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: none, same-origin index page only)
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )
    app.state.services = services

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_methods=["GET"],
            allow_headers=["*"],
        )
        log.debug(f"CORS enabled for origins: {list(cors_origins)}")

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================

    app.include_router(blaster.router)
    app.include_router(system.router, prefix="/api/v1")
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    log.debug("Routes registered: /do, /color, /, /static, /api/v1/system")

    # =========================================================================
    # Health Check Endpoint
    # =========================================================================

    @app.get(
        "/api/health",
        tags=["System"],
        summary="Health check",
        description="Check if API is running and responding"
    )
    async def health_check():
        """Simple health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "service": "rgb-blaster",
            "version": version
        }

    log.info(f"FastAPI app created: {title} v{version}")
    return app
