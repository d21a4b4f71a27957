import inspect
import logging
from typing import Awaitable, Callable, Dict, List, Union

from htbridge.core.bus_topics import HemtjanstTopics, topic_to_subject
from htbridge.domain.device.device_model import DeviceMeta, FeatureMeta

logger = logging.getLogger(__name__)

UpdateCallback = Callable[["RemoteDevice", str, str], Union[None, Awaitable[None]]]


class RemoteDevice:
    """A device announced on the bus, as seen by the bridge."""

    def __init__(self, meta: DeviceMeta, bus):
        self.meta = meta
        self._bus = bus
        self._update_callbacks: Dict[str, List[UpdateCallback]] = {}

    def topic_name(self) -> str:
        return self.meta.topic

    def get_name(self) -> str:
        return self.meta.name or self.meta.topic

    def get_type(self) -> str:
        return self.meta.type

    def get_features(self) -> Dict[str, FeatureMeta]:
        return self.meta.feature

    def get_topic(self, feature: str) -> str:
        meta = self.meta.feature.get(feature)
        if meta is not None and meta.get_topic:
            return meta.get_topic
        return HemtjanstTopics.feature_get(self.meta.topic, feature)

    def set_topic(self, feature: str) -> str:
        meta = self.meta.feature.get(feature)
        if meta is not None and meta.set_topic:
            return meta.set_topic
        return HemtjanstTopics.feature_set(self.meta.topic, feature)

    def update_meta(self, meta: DeviceMeta) -> None:
        self.meta = meta

    def on_update(self, feature: str, callback: UpdateCallback) -> None:
        self._update_callbacks.setdefault(feature, []).append(callback)

    async def set(self, feature: str, value: str) -> None:
        topic = self.set_topic(feature)
        logger.info("Set %s/%s -> %r", self.meta.topic, feature, value)
        await self._bus.publish(topic_to_subject(topic), value)

    async def dispatch_update(self, feature: str, value: str) -> None:
        for callback in list(self._update_callbacks.get(feature, [])):
            try:
                result = callback(self, feature, value)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Update callback failed for %s/%s", self.meta.topic, feature
                )
