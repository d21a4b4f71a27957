"""Static table mapping Hemtjanst feature ids to gateway properties."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from htbridge.domain.capabilities import transforms
from htbridge.domain.capabilities.enums import Unit, ValueType


@dataclass(frozen=True)
class CapabilitySpec:
    capability_id: str
    name: str
    value_type: ValueType
    unit: Optional[Unit]
    decode: transforms.Decoder
    encode: transforms.Encoder


def _boolean(capability_id: str, name: str) -> CapabilitySpec:
    return CapabilitySpec(
        capability_id=capability_id,
        name=name,
        value_type=ValueType.BOOLEAN,
        unit=None,
        decode=transforms.decode_boolean,
        encode=transforms.encode_boolean,
    )


def _measurement(capability_id: str, name: str, unit: Unit) -> CapabilitySpec:
    return CapabilitySpec(
        capability_id=capability_id,
        name=name,
        value_type=ValueType.NUMBER,
        unit=unit,
        decode=transforms.decode_float,
        encode=transforms.encode_float,
    )


_SPECS = (
    _boolean("contactSensorState", "on"),
    _boolean("on", "on"),
    CapabilitySpec(
        capability_id="brightness",
        name="level",
        value_type=ValueType.NUMBER,
        unit=Unit.PERCENT,
        decode=transforms.decode_integer,
        encode=transforms.encode_integer,
    ),
    CapabilitySpec(
        capability_id="color",
        name="color",
        value_type=ValueType.STRING,
        unit=None,
        decode=transforms.identity,
        encode=transforms.to_string,
    ),
    _measurement("currentPower", "instantaneousPower", Unit.WATT),
    _measurement("currentVoltage", "voltage", Unit.VOLT),
    _measurement("currentAmpere", "current", Unit.AMPERE),
)

# Insertion order is the table order above; translators rely on it.
CAPABILITY_SPECS: Mapping[str, CapabilitySpec] = MappingProxyType(
    {spec.capability_id: spec for spec in _SPECS}
)


def lookup(capability_id: str) -> Optional[CapabilitySpec]:
    return CAPABILITY_SPECS.get(capability_id)
