"""Conversions between scalar text and Python values."""

from __future__ import annotations

import math
import re
from typing import Any

from jfegal.yaml.binary import Binary, encode_base64
from jfegal.yaml.errors import BadConversion

_TRAILING_SPACE = "[ \t\n\v\f\r]*"

_INTEGER = re.compile(
    r"(?P<sign>[+-]?)"
    r"(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))"
    + _TRAILING_SPACE
)

_FLOAT = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?" + _TRAILING_SPACE
)

_INFINITY = frozenset({".inf", ".Inf", ".INF", "+.inf", "+.Inf", "+.INF"})
_NEGATIVE_INFINITY = frozenset({"-.inf", "-.Inf", "-.INF"})
_NAN = frozenset({".nan", ".NaN", ".NAN"})


def is_infinity(text: str) -> bool:
    """Whether the text spells positive infinity."""
    return text in _INFINITY


def is_negative_infinity(text: str) -> bool:
    """Whether the text spells negative infinity."""
    return text in _NEGATIVE_INFINITY


def is_nan(text: str) -> bool:
    """Whether the text spells not-a-number."""
    return text in _NAN


def is_numeric(value: Any) -> bool:
    """Whether a value is a number; booleans are not."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float))


def decode_integer(text: str, bits: int = 32, signed: bool = True) -> int:
    """Read an integer of the given width.

    The base follows the prefix: ``0x`` is hexadecimal and a leading ``0``
    octal. Leading whitespace is refused, trailing whitespace allowed.
    Raises BadConversion when the text is not an integer or does not fit.
    """
    if not signed and text.startswith("-"):
        raise BadConversion(kind=int)
    match = _INTEGER.fullmatch(text)
    if match is None:
        raise BadConversion(kind=int)
    if match["hex"] is not None:
        magnitude = int(match["hex"], 16)
    elif match["oct"] is not None:
        magnitude = int(match["oct"], 8)
    else:
        magnitude = int(match["dec"], 10)
    value = -magnitude if match["sign"] == "-" else magnitude
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise BadConversion(kind=int)
    return value


def decode_float(text: str) -> float:
    """Read a floating-point number, including the YAML infinity and NaN spellings.

    Raises BadConversion when the text is not a number or overflows.
    """
    if _FLOAT.fullmatch(text):
        value = float(text.rstrip(" \t\n\v\f\r"))
        if not math.isinf(value):
            return value
    if is_infinity(text):
        return math.inf
    if is_negative_infinity(text):
        return -math.inf
    if is_nan(text):
        return math.nan
    raise BadConversion(kind=float)


def _encode_float(value: float) -> str:
    if math.isnan(value):
        return ".nan"
    if math.isinf(value):
        return "-.inf" if value < 0 else ".inf"
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_scalar(value: Any) -> str:
    """Render a scalar value as YAML scalar text."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _encode_float(value)
    if isinstance(value, Binary):
        return encode_base64(value.data)
    if isinstance(value, (bytes, bytearray)):
        return encode_base64(bytes(value))
    raise TypeError(f"cannot encode {type(value).__name__} as a scalar")