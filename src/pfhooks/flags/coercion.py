"""
Typed value coercion for flag overrides.

Override declarations carry their value as a string plus a type tag.
This module turns that pair into a FlagValue:

- int: base-10 signed 64-bit integer
- bool: true only for the literal "true"
- float: decimal float (optional exponent and f/d suffix, or NaN/Infinity),
  rounded to 32-bit precision
- string: verbatim
- extension: standard base64 without line wrapping, padding optional, decoded to bytes
"""

from __future__ import annotations

import base64 as _base64
import binascii as _binascii
import dataclasses as _dataclasses
import enum as _enum
import math as _math
import re as _re
import struct as _struct
import typing as _typing

import pfhooks.flags.errors as errors

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INT_PATTERN = _re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = _re.compile(
    r"(?P<number>[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))[fFdD]?"
)
_BASE64_PATTERN = _re.compile(r"[A-Za-z0-9+/]*")
_BASE64_PAD = "="


class FlagType(str, _enum.Enum):
    """Supported override type tags."""

    INT = "int"
    BOOL = "bool"
    FLOAT = "float"
    STRING = "string"
    EXTENSION = "extension"

    @classmethod
    def from_tag(cls, type_tag: str) -> FlagType:
        """
        Look up a type tag.

        Raises:
            UnsupportedTypeTagError: If the tag is not one of the supported types.
        """
        try:
            return cls(type_tag)
        except ValueError:
            raise errors.UnsupportedTypeTagError(type_tag) from None


FlagPayload = _typing.Union[int, bool, float, str, bytes]


@_dataclasses.dataclass(frozen=True)
class FlagValue:
    """A typed override value."""

    type: FlagType
    value: FlagPayload

    def to_property_map_value(self) -> _typing.Any:
        """
        Representation stored into a property map.

        Booleans are stored as "1"/"0"; everything else is unchanged.
        """
        if self.type is FlagType.BOOL:
            return "1" if self.value else "0"
        return self.value


def _parse_int(raw_value: str) -> int:
    if not _INT_PATTERN.fullmatch(raw_value):
        raise errors.ValueParseError("int", raw_value, "not a base-10 integer")
    value = int(raw_value, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise errors.ValueParseError("int", raw_value, "out of 64-bit range")
    return value


def _parse_float(raw_value: str) -> float:
    match = _FLOAT_PATTERN.fullmatch(raw_value.strip())
    if match is None:
        raise errors.ValueParseError("float", raw_value, "not a decimal number")
    value = float(match.group("number"))
    try:
        return _struct.unpack("f", _struct.pack("f", value))[0]
    except OverflowError:
        return _math.copysign(_math.inf, value)


def _decode_extension(raw_value: str) -> bytes:
    data = raw_value.rstrip(_BASE64_PAD)
    padding = len(raw_value) - len(data)
    if not _BASE64_PATTERN.fullmatch(data) or len(data) % 4 == 1:
        raise errors.ValueParseError("extension", raw_value, "not standard base64")
    # Padding is optional, but when present it must complete the last quantum
    if padding and (padding > 2 or (len(data) + padding) % 4):
        raise errors.ValueParseError("extension", raw_value, "incorrect padding")
    padded = data + _BASE64_PAD * (-len(data) % 4)
    try:
        return _base64.b64decode(padded, validate=True)
    except _binascii.Error as e:
        raise errors.ValueParseError("extension", raw_value, str(e)) from e



def coerce(type_tag: str | FlagType, raw_value: str) -> FlagValue:
    """
    Convert a raw declaration value to a typed FlagValue.

    Args:
        type_tag: One of int, bool, float, string, extension.
        raw_value: The raw string after '=' in the declaration.

    Returns:
        The typed value.

    Raises:
        UnsupportedTypeTagError: Unknown type tag.
        ValueParseError: The value cannot be parsed as the declared type.
    """
    flag_type = type_tag if isinstance(type_tag, FlagType) else FlagType.from_tag(type_tag)

    if flag_type is FlagType.INT:
        return FlagValue(flag_type, _parse_int(raw_value))
    if flag_type is FlagType.BOOL:
        return FlagValue(flag_type, raw_value == "true")
    if flag_type is FlagType.FLOAT:
        return FlagValue(flag_type, _parse_float(raw_value))
    if flag_type is FlagType.EXTENSION:
        return FlagValue(flag_type, _decode_extension(raw_value))
    return FlagValue(flag_type, raw_value)
