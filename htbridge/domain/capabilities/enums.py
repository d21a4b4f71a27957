from enum import Enum


class ValueType(str, Enum):
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"


class Unit(str, Enum):
    PERCENT = "percent"
    WATT = "watt"
    VOLT = "volt"
    AMPERE = "ampere"
