import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from htbridge.application.feature_binding import FeatureBinding
from htbridge.domain.device.enums import DeviceTypeTag
from htbridge.domain.errors import TranslationError, UnknownPropertyError

logger = logging.getLogger(__name__)

ChangeListener = Callable[["GatewayDevice", FeatureBinding], Union[None, Awaitable[None]]]


class GatewayDevice:
    """Gateway-facing record of one translated Hemtjanst device."""

    def __init__(self, device_id: str, name: str, device_type: DeviceTypeTag, topic: Optional[str] = None):
        self.id = device_id
        self.name = name
        self.type = device_type
        self.topic = topic
        self.properties: Dict[str, FeatureBinding] = {}
        self._change_listeners: List[ChangeListener] = []

    def add_property(self, binding: FeatureBinding) -> None:
        existing = self.properties.get(binding.name)
        if existing is not None:
            raise TranslationError(
                f"Device {self.id}: features {existing.capability_id!r} and "
                f"{binding.capability_id!r} both map to property {binding.name!r}"
            )
        self.properties[binding.name] = binding

    def get_property(self, name: str) -> FeatureBinding:
        try:
            return self.properties[name]
        except KeyError:
            raise UnknownPropertyError(f"Device {self.id} has no property {name!r}") from None

    def get_property_value(self, name: str) -> Any:
        return self.get_property(name).value

    async def set_property(self, name: str, value: Any) -> Any:
        return await self.get_property(name).request_set(value)

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    async def notify_property_changed(self, binding: FeatureBinding) -> None:
        for listener in list(self._change_listeners):
            try:
                result = listener(self, binding)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Change listener failed for %s.%s", self.id, binding.name
                )

    def as_thing_description(self) -> dict:
        return {
            "id": self.id,
            "title": self.name,
            "@type": self.type.value,
            "type": self.type.value,
            "properties": {
                name: binding.describe() for name, binding in self.properties.items()
            },
        }
