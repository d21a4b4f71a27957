from typing import Iterable

from htbridge.domain.device.enums import DeviceKind, DeviceTypeTag

CAP_BRIGHTNESS = "brightness"
CAP_COLOR = "color"
CAP_COLOR_TEMPERATURE = "colorTemperature"
CAP_CURRENT_POWER = "currentPower"


def classify(kind: str, capability_ids: Iterable[str]) -> DeviceTypeTag:
    capabilities = set(capability_ids)

    match kind:
        case DeviceKind.OUTLET:
            if CAP_CURRENT_POWER in capabilities:
                return DeviceTypeTag.SMART_PLUG
            return DeviceTypeTag.ON_OFF_SWITCH

        case DeviceKind.SWITCH:
            return DeviceTypeTag.ON_OFF_SWITCH

        case DeviceKind.CONTACT_SENSOR:
            return DeviceTypeTag.BINARY_SENSOR

        case DeviceKind.LIGHTBULB:
            return _classify_light(capabilities)

        case _:
            return DeviceTypeTag.THING


def _classify_light(capabilities: set) -> DeviceTypeTag:
    dimmable = CAP_BRIGHTNESS in capabilities
    color = CAP_COLOR in capabilities
    # CAP_COLOR_TEMPERATURE has no tag of its own; tunable white bulbs fall
    # through to the brightness/color precedence below.

    if dimmable and color:
        return DeviceTypeTag.DIMMABLE_COLOR_LIGHT
    if color:
        return DeviceTypeTag.ON_OFF_COLOR_LIGHT
    if dimmable:
        return DeviceTypeTag.DIMMABLE_LIGHT
    return DeviceTypeTag.ON_OFF_LIGHT
