import logging
from typing import Optional

from htbridge.application.sync_controller import SyncController
from htbridge.core.config import settings
from htbridge.core.nats_client import nats_client
from htbridge.core.status_service import StatusPublishTrigger, StatusService
from htbridge.infrastructure.gateway.gateway_registry import GatewayRegistry
from htbridge.infrastructure.hemtjanst.server import HemtjanstServer

logger = logging.getLogger(__name__)


class Bridge:
    """Wires the Hemtjanst server, the sync controller and the gateway side."""

    def __init__(
        self,
        bus=nats_client,
        server: Optional[HemtjanstServer] = None,
        registry: Optional[GatewayRegistry] = None,
        controller: Optional[SyncController] = None,
        status_service: Optional[StatusService] = None,
    ):
        self.bus = bus
        self.server = server or HemtjanstServer(bus=bus)
        self.registry = registry or GatewayRegistry(bus=bus)
        self.controller = controller or SyncController(gateway=self.registry)
        self.status_service = status_service or StatusService(self.controller, self.registry, bus=bus)

        self.controller.attach(self.server)
        self.controller.add_ready_listener(self.registry.on_ready)

    @property
    def ready(self) -> bool:
        return self.controller.ready

    async def start(self, discover: Optional[bool] = None) -> None:
        if discover is None:
            discover = settings.DISCOVER_ON_START
        await self.server.start(discover=discover)
        await self.status_service.start()
        logger.info("Bridge started, discovering devices...")

    async def stop(self) -> None:
        await self.status_service.stop()
        await self.controller.stop()
        await self.server.stop()
        await self.registry.http_adapter.close()
        logger.info("Bridge stopped.")


bridge = Bridge()
