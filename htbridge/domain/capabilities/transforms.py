"""Wire <-> typed value transforms.

Hemtjanst carries every feature value as a string. Each ``decode_*`` turns a
wire string into a native value and raises :class:`DecodeError` when the
string is outside the legal domain; each ``encode_*`` does the reverse.
"""
import math
from numbers import Real
from typing import Any, Callable

from htbridge.domain.errors import DecodeError, EncodeError

Decoder = Callable[[str], Any]
Encoder = Callable[[Any], str]

TRUE_WIRE_VALUES = ("true", "1")


def decode_boolean(wire: str) -> bool:
    return wire in TRUE_WIRE_VALUES


def encode_boolean(value: Any) -> str:
    # A string coming from a loosely typed caller is read like a wire value,
    # so "false" does not turn into "1".
    if isinstance(value, str):
        value = decode_boolean(value)
    return "1" if value else "0"


def decode_integer(wire: str) -> int:
    try:
        return int(wire.strip())
    except (AttributeError, ValueError):
        pass

    try:
        number = float(wire)
        if not math.isfinite(number):
            raise ValueError(wire)
        return int(number)
    except (TypeError, ValueError):
        raise DecodeError("integer", wire) from None


def encode_integer(value: Any) -> str:
    if isinstance(value, str):
        value = decode_float(value)
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise EncodeError("integer", value)
    return str(int(round(value)))


def decode_float(wire: str) -> float:
    try:
        number = float(wire)
    except (TypeError, ValueError):
        raise DecodeError("number", wire) from None
    if not math.isfinite(number):
        raise DecodeError("number", wire)
    return number


def encode_float(value: Any) -> str:
    if isinstance(value, str):
        value = decode_float(value)
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise EncodeError("number", value)
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def identity(wire: str) -> str:
    return wire


def to_string(value: Any) -> str:
    if value is None:
        raise EncodeError("string", value)
    return str(value)
