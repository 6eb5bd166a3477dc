"""
API Dependencies - Service container access for FastAPI endpoints

main_asyncio.py builds the ServiceContainer and passes it to create_app(),
which stores it on app.state. Endpoints receive it through Depends().

Example:
    @router.get("/color")
    async def current_color(services: ServiceContainer = Depends(get_service_container)):
        return await services.blaster.query_color()
"""

from fastapi import HTTPException, Request, status
from services.service_container import ServiceContainer


async def get_service_container(request: Request) -> ServiceContainer:
    """
    Raises:
        HTTPException: 503 if the app was created without services
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service container not initialized. Blaster may still be starting."
        )
    return services


def caller_id(request: Request) -> str:
    """host:port of the HTTP client, used to attribute query faults"""
    client = request.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"
