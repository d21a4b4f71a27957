import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional, Union

from htbridge.domain.capabilities.capability_spec import CapabilitySpec
from htbridge.domain.capabilities.enums import Unit, ValueType
from htbridge.domain.capabilities.transforms import Decoder, Encoder

if TYPE_CHECKING:
    from htbridge.application.gateway_device import GatewayDevice

logger = logging.getLogger(__name__)

SetListener = Callable[[str], Union[None, Awaitable[None]]]


class FeatureBinding:
    """One gateway property backed by one remote Hemtjanst feature.

    Inbound wire values are decoded into the cached value and announced
    through the owning device. Outbound set requests are encoded and handed
    to every registered set listener. Updates and sets for the same property
    are serialized by a per-property lock; change listeners run while it is
    held, so they must not call ``request_set`` on the same property inline.
    """

    def __init__(
        self,
        device: "GatewayDevice",
        name: str,
        value_type: ValueType,
        unit: Optional[Unit],
        decode: Decoder,
        encode: Encoder,
        capability_id: Optional[str] = None,
    ):
        self.device = device
        self.name = name
        self.value_type = value_type
        self.unit = unit
        self.capability_id = capability_id or name
        self._decode = decode
        self._encode = encode
        self._value: Any = None
        self._set_listeners: List[SetListener] = []
        self._lock = asyncio.Lock()

    @classmethod
    def from_spec(cls, device: "GatewayDevice", spec: CapabilitySpec) -> "FeatureBinding":
        return cls(
            device,
            spec.name,
            spec.value_type,
            spec.unit,
            spec.decode,
            spec.encode,
            capability_id=spec.capability_id,
        )

    @property
    def value(self) -> Any:
        return self._value

    def add_set_listener(self, listener: SetListener) -> None:
        self._set_listeners.append(listener)

    async def on_remote_update(self, wire_value: str) -> bool:
        async with self._lock:
            try:
                value = self._decode(wire_value)
            except ValueError as exc:
                logger.warning(
                    "Dropping update for %s.%s (%s): %s",
                    self.device.id,
                    self.name,
                    self.capability_id,
                    exc,
                )
                return False

            self._value = value
            logger.debug("New value from bus %s.%s = %r", self.device.id, self.name, value)
            await self.device.notify_property_changed(self)
            return True

    async def request_set(self, value: Any) -> Any:
        """Forward a gateway set request to the remote feature.

        Returns ``value`` as accepted, without waiting for the device to
        confirm it. The cached value only changes when the device echoes the
        new state back through ``on_remote_update``.
        """
        async with self._lock:
            wire_value = self._encode(value)
            logger.info(
                "New value from gateway %s.%s = %r (wire=%r)",
                self.device.id,
                self.name,
                value,
                wire_value,
            )

            for listener in list(self._set_listeners):
                try:
                    result = listener(wire_value)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception(
                        "Set listener failed for %s.%s", self.device.id, self.name
                    )

        return value

    def describe(self) -> dict:
        description = {
            "name": self.name,
            "type": self.value_type.value,
            "value": self._value,
        }
        if self.unit is not None:
            description["unit"] = self.unit.value
        return description
