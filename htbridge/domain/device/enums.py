from enum import Enum


class DeviceKind(str, Enum):
    """Coarse device kinds announced by Hemtjanst devices."""

    OUTLET = "outlet"
    SWITCH = "switch"
    LIGHTBULB = "lightbulb"
    CONTACT_SENSOR = "contactSensor"


class DeviceTypeTag(str, Enum):
    ON_OFF_SWITCH = "onOffSwitch"
    BINARY_SENSOR = "binarySensor"
    SMART_PLUG = "smartPlug"
    DIMMABLE_LIGHT = "dimmableLight"
    ON_OFF_COLOR_LIGHT = "onOffColorLight"
    DIMMABLE_COLOR_LIGHT = "dimmableColorLight"
    ON_OFF_LIGHT = "onOffLight"
    THING = "thing"
