"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass

from models.config import BlasterConfig
from services.action_service import ActionService
from services.blaster import Blaster
from services.cooldown import Cooldown


@dataclass
class ServiceContainer:
    """
    Everything the HTTP layer needs, built once in main_asyncio.py.

    The container is stored on `app.state.services`; endpoints get it through
    the get_service_container dependency.

    Usage:
        services = ServiceContainer(
            config=config,
            blaster=blaster,
            action_service=ActionService(blaster),
            cooldown=Cooldown(0.01),
        )
        app = create_app(services)

        @router.get("/color")
        async def color(services: ServiceContainer = Depends(get_service_container)):
            return await services.blaster.query_color()
    """

    config: BlasterConfig
    blaster: Blaster
    action_service: ActionService
    cooldown: Cooldown
