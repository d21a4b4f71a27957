class BridgeError(Exception):
    """Base class for errors raised by the bridge core."""


class DecodeError(BridgeError, ValueError):
    """A wire value could not be parsed into the declared value type."""

    def __init__(self, value_type: str, wire_value):
        super().__init__(f"Cannot decode {wire_value!r} as {value_type}")
        self.value_type = value_type
        self.wire_value = wire_value


class EncodeError(BridgeError, ValueError):
    """A typed value could not be rendered into its wire format."""

    def __init__(self, value_type: str, value):
        super().__init__(f"Cannot encode {value!r} as {value_type}")
        self.value_type = value_type
        self.value = value


class TranslationError(BridgeError):
    """A remote device could not be turned into a gateway device."""


class UnknownDeviceError(BridgeError, LookupError):
    pass


class UnknownPropertyError(BridgeError, LookupError):
    pass
