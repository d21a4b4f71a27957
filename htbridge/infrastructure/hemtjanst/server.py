import asyncio
import inspect
import json
import logging
from typing import Any, Callable, Dict, List, Tuple

from pydantic import ValidationError

from htbridge.core.bus_topics import HemtjanstTopics, subject_to_topic, topic_to_subject, wildcard
from htbridge.core.nats_client import nats_client
from htbridge.domain.device.device_model import DeviceMeta
from htbridge.infrastructure.hemtjanst.remote_device import RemoteDevice

logger = logging.getLogger(__name__)

DeviceListener = Callable[[RemoteDevice], Any]


class HemtjanstServer:
    """Discovers Hemtjanst devices on the bus and routes their feature values."""

    def __init__(self, bus=nats_client):
        self.bus = bus
        self.devices: Dict[str, RemoteDevice] = {}
        self._device_listeners: List[DeviceListener] = []
        self._feature_routes: Dict[str, List[Tuple[RemoteDevice, str]]] = {}
        self._subscriptions: List[Any] = []
        self._lock = asyncio.Lock()

    def on_device(self, listener: DeviceListener) -> None:
        self._device_listeners.append(listener)

    async def start(self, discover: bool = True) -> None:
        self._subscriptions.append(
            await self.bus.subscribe(wildcard(HemtjanstTopics.ANNOUNCE), self._on_announce)
        )
        self._subscriptions.append(
            await self.bus.subscribe(wildcard(HemtjanstTopics.LEAVE), self._on_leave)
        )
        if discover:
            await self.discover()

    async def discover(self) -> None:
        logger.info("Requesting device announcements")
        await self.bus.publish(topic_to_subject(HemtjanstTopics.DISCOVER), "1")

    async def _on_announce(self, msg) -> None:
        try:
            await self.handle_announce(msg.data)
        except Exception:
            logger.exception("Unhandled error while processing announce on %s", msg.subject)

    async def _on_leave(self, msg) -> None:
        topic = subject_to_topic(msg.subject).split("/", 1)[-1]
        self.handle_leave(topic)

    async def _on_feature_value(self, msg) -> None:
        try:
            await self.handle_feature_value(msg.subject, msg.data.decode("utf-8"))
        except Exception:
            logger.exception("Unhandled error while processing value on %s", msg.subject)

    async def handle_announce(self, payload: bytes) -> None:
        try:
            meta = DeviceMeta(**json.loads(payload))
        except (ValueError, TypeError, ValidationError):
            logger.error(f"Invalid device announcement: {payload!r}")
            return

        async with self._lock:
            device = self.devices.get(meta.topic)
            if device is not None:
                logger.debug("Re-announce of %s, refreshing meta", meta.topic)
                device.update_meta(meta)
                await self._subscribe_features(device)
                return

            device = RemoteDevice(meta, self.bus)
            self.devices[meta.topic] = device
            logger.info(
                "New device %s (%s) type=%s features=%s",
                meta.topic,
                meta.name,
                meta.type,
                list(meta.feature),
            )

        # Listeners attach their update callbacks before any value is routed.
        await self._emit_device(device)
        async with self._lock:
            await self._subscribe_features(device)

    def handle_leave(self, topic: str) -> None:
        # The gateway record stays; device removal is not modeled.
        if topic in self.devices:
            logger.info("Device %s left", topic)

    async def handle_feature_value(self, subject: str, value: str) -> None:
        for device, feature in self._feature_routes.get(subject, []):
            await device.dispatch_update(feature, value)

    async def _subscribe_features(self, device: RemoteDevice) -> None:
        for feature in device.get_features():
            subject = topic_to_subject(device.get_topic(feature))
            routes = self._feature_routes.get(subject)
            if routes is None:
                routes = self._feature_routes[subject] = []
                self._subscriptions.append(
                    await self.bus.subscribe(subject, self._on_feature_value)
                )
            if (device, feature) not in routes:
                routes.append((device, feature))

    async def _emit_device(self, device: RemoteDevice) -> None:
        for listener in list(self._device_listeners):
            try:
                result = listener(device)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Device listener failed for %s", device.topic_name())

    async def stop(self) -> None:
        for sub in self._subscriptions:
            try:
                await sub.unsubscribe()
            except Exception:
                logger.debug("Unsubscribe failed", exc_info=True)
        self._subscriptions.clear()
        self._feature_routes.clear()
        logger.info("Hemtjanst server stopped.")

