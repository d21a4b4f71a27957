import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from htbridge.application.feature_binding import FeatureBinding
from htbridge.application.gateway_device import GatewayDevice
from htbridge.core.bus_topics import GatewayEvents, GatewaySubjects
from htbridge.core.nats_client import nats_client
from htbridge.domain.events.device_events import PropertyChangedEvent
from htbridge.infrastructure.gateway.gateway_http_adapter import GatewayHttpAdapter, gateway_http_adapter

logger = logging.getLogger(__name__)


class GatewayRegistry:
    """Devices registered with the gateway, plus their change fan-out."""

    def __init__(self, bus=nats_client, http_adapter: GatewayHttpAdapter = gateway_http_adapter):
        self.bus = bus
        self.http_adapter = http_adapter
        self.devices: Dict[str, GatewayDevice] = {}
        self._pending: Set[asyncio.Task] = set()

    async def handle_device_added(self, device: GatewayDevice) -> None:
        self.devices[device.id] = device
        device.add_change_listener(self._on_property_changed)

        description = device.as_thing_description()
        logger.info(f"Device added to gateway: {device.id} ({device.name})")

        await self._publish_event(GatewayEvents.DEVICE_ADDED, {"device": description})
        await self.http_adapter.add_thing(description)

    def get_device(self, device_id: str) -> Optional[GatewayDevice]:
        return self.devices.get(device_id)

    def get_devices_status(self) -> List[dict]:
        return [device.as_thing_description() for device in self.devices.values()]

    async def _on_property_changed(self, device: GatewayDevice, binding: FeatureBinding) -> None:
        event = PropertyChangedEvent(
            event_type=GatewayEvents.PROPERTY_CHANGED,
            device_id=device.id,
            property=binding.name,
            value=binding.value,
            unit=binding.unit.value if binding.unit else None,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        await self._publish(GatewaySubjects.event(), event.model_dump())
        await self.http_adapter.update_property(device.id, binding.name, binding.value)

    def on_ready(self) -> None:
        task = asyncio.create_task(
            self._publish_event(GatewayEvents.ADAPTER_READY, {"device_count": len(self.devices)})
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish_event(self, event_type: str, payload: dict) -> None:
        await self._publish(
            GatewaySubjects.event(),
            {"event_type": event_type, "payload": payload},
        )

    async def _publish(self, subject: str, message: dict) -> None:
        try:
            await self.bus.publish_json(subject, message)
        except Exception:
            logger.exception("Gateway event publish failed | subject=%s", subject)

