import functools
import logging
from typing import Mapping

from htbridge.application.device_classifier import classify
from htbridge.application.feature_binding import FeatureBinding
from htbridge.application.gateway_device import GatewayDevice
from htbridge.domain.capabilities.capability_spec import CAPABILITY_SPECS, CapabilitySpec

logger = logging.getLogger(__name__)

ID_PREFIX = "HT-"


def topic_to_id(topic: str) -> str:
    return ID_PREFIX + topic.replace("/", "-")


class DeviceTranslator:

    def __init__(self, specs: Mapping[str, CapabilitySpec] = CAPABILITY_SPECS):
        self._specs = specs

    def translate(self, remote) -> GatewayDevice:
        """Build the gateway record for a discovered remote device and wire it.

        `remote` is anything exposing the Hemtjanst device surface:
        topic_name(), get_name(), get_type(), get_features(), on_update() and
        set().
        """
        device = self.build(remote)
        self.connect(remote, device)
        return device

    def build(self, remote) -> GatewayDevice:
        """Create the device and its properties without touching `remote`.

        Properties are created in capability table order; features without
        a table entry are skipped.
        """
        topic = remote.topic_name()
        features = remote.get_features()

        device = GatewayDevice(
            device_id=topic_to_id(topic),
            name=remote.get_name(),
            device_type=classify(remote.get_type(), features.keys()),
            topic=topic,
        )

        for capability_id, spec in self._specs.items():
            if capability_id in features:
                device.add_property(FeatureBinding.from_spec(device, spec))

        skipped = [f for f in features if f not in self._specs]
        if skipped:
            logger.debug("Device %s: unmapped features %s", device.id, skipped)

        logger.info(
            "Translated device %s (%s) type=%s properties=%s",
            device.id,
            device.name,
            device.type.value,
            list(device.properties),
        )
        return device

    def connect(self, remote, device: GatewayDevice) -> None:
        """Route `remote` updates into the bindings and set requests back out."""
        for binding in device.properties.values():
            self._wire(remote, binding)

    @staticmethod
    def _wire(remote, binding: FeatureBinding) -> None:
        def on_update(_device, _capability_id, wire_value):
            return binding.on_remote_update(wire_value)

        remote.on_update(binding.capability_id, on_update)
        binding.add_set_listener(functools.partial(remote.set, binding.capability_id))


device_translator = DeviceTranslator()
