import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from htbridge.application.device_translator import DeviceTranslator, device_translator, topic_to_id
from htbridge.application.gateway_device import GatewayDevice
from htbridge.core.config import settings
from htbridge.domain.errors import UnknownDeviceError

logger = logging.getLogger(__name__)


class AdapterState(str, Enum):
    DISCOVERING = "DISCOVERING"
    READY = "READY"


class SyncController:
    """Turns discovered Hemtjanst devices into gateway devices.

    The adapter starts in DISCOVERING and switches to READY once,
    ``settle_delay`` seconds after the first discovery event. It never goes
    back. ``stop()`` cancels a pending switch.
    """

    def __init__(
        self,
        gateway,
        translator: DeviceTranslator = device_translator,
        settle_delay: Optional[float] = None,
    ):
        self.gateway = gateway
        self.translator = translator
        self.settle_delay = settings.SETTLE_DELAY if settle_delay is None else settle_delay
        self.state = AdapterState.DISCOVERING
        self.devices: Dict[str, GatewayDevice] = {}
        self._ready_timer: Optional[asyncio.TimerHandle] = None
        self._ready_listeners: List[Callable[[], Any]] = []
        self._stopped = False

    @property
    def ready(self) -> bool:
        return self.state == AdapterState.READY

    def attach(self, server) -> None:
        server.on_device(self.handle_device_discovered)

    def add_ready_listener(self, listener: Callable[[], Any]) -> None:
        self._ready_listeners.append(listener)

    async def handle_device_discovered(self, remote) -> Optional[GatewayDevice]:
        if self._stopped:
            logger.debug("Controller stopped, ignoring discovered device")
            return None

        self._schedule_ready()

        device_id = None
        try:
            device_id = topic_to_id(remote.topic_name())
            if device_id in self.devices:
                logger.debug("Device %s already registered, skipping", device_id)
                return self.devices[device_id]

            device = self.translator.build(remote)
            # Claimed before the await so a concurrent re-announce is skipped.
            self.devices[device.id] = device

            result = self.gateway.handle_device_added(device)
            if inspect.isawaitable(result):
                await result

            # Only a registered device gets callbacks on the remote.
            self.translator.connect(remote, device)
            return device

        except Exception:
            logger.exception("Failed to add discovered device %s", device_id)
            if device_id is not None:
                self.devices.pop(device_id, None)
            return None

    def get_device(self, device_id: str) -> GatewayDevice:
        device = self.devices.get(device_id)
        if device is None:
            raise UnknownDeviceError(f"Unknown device {device_id!r}")
        return device

    async def request_set(self, device_id: str, property_name: str, value: Any) -> Any:
        device = self.get_device(device_id)
        return await device.set_property(property_name, value)

    def _schedule_ready(self) -> None:
        if self._ready_timer is not None or self.ready:
            return

        loop = asyncio.get_running_loop()
        self._ready_timer = loop.call_later(self.settle_delay, self._mark_ready)

    def _mark_ready(self) -> None:
        if self._stopped or self.ready:
            return

        self.state = AdapterState.READY
        logger.info(
            "Adapter: %s id %s setting ready=true (%d devices)",
            settings.ADAPTER_NAME,
            settings.ADAPTER_ID,
            len(self.devices),
        )

        for listener in list(self._ready_listeners):
            try:
                listener()
            except Exception:
                logger.exception("Ready listener failed")

    async def stop(self) -> None:
        self._stopped = True
        if self._ready_timer is not None:
            self._ready_timer.cancel()
            self._ready_timer = None
        logger.info("Sync controller stopped.")
