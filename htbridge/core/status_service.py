import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from htbridge.core.bus_topics import GatewaySubjects
from htbridge.core.config import settings
from htbridge.core.nats_client import nats_client

logger = logging.getLogger(__name__)


class StatusPublishTrigger(str, Enum):
    INTERVAL = "INTERVAL"
    MANUAL = "MANUAL"
    READY = "READY"


class StatusService:

    def __init__(self, controller, registry, bus=nats_client, interval: Optional[int] = None):
        self.controller = controller
        self.registry = registry
        self.bus = bus
        self._interval = interval or settings.STATUS_INTERVAL
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._publish_lock = asyncio.Lock()

    def build_status_payload(self) -> dict:
        devices = self.registry.get_devices_status()
        return {
            "adapter": settings.ADAPTER_ID,
            "name": settings.ADAPTER_NAME,
            "ready": self.controller.ready,
            "state": self.controller.state.value,
            "timestamp": int(datetime.now(timezone.utc).timestamp()),
            "device_count": len(devices),
            "devices": devices,
        }

    async def _publish_status(self, *, trigger: StatusPublishTrigger) -> None:
        subject = GatewaySubjects.status()
        payload = self.build_status_payload()

        logger.info(
            "Publishing status | trigger=%s subject=%s ready=%s devices=%s",
            trigger.value,
            subject,
            payload["ready"],
            payload["device_count"],
        )

        await self.bus.publish_json(subject, payload)

    async def start(self):
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._loop())

    async def publish_now(
        self,
        *,
        trigger: StatusPublishTrigger = StatusPublishTrigger.MANUAL,
    ) -> bool:
        try:
            async with self._publish_lock:
                await self._publish_status(trigger=trigger)
            return True
        except Exception:
            logger.exception(
                "Immediate status publish failed | trigger=%s",
                trigger.value,
            )
            return False

    async def stop(self):
        if not self._running:
            return

        logger.info("Stopping status loop.")
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _loop(self):
        while self._running:
            try:
                async with self._publish_lock:
                    await self._publish_status(trigger=StatusPublishTrigger.INTERVAL)
            except Exception:
                logger.exception("Status publish error")

            await asyncio.sleep(self._interval)
