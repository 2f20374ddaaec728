"""Canonical JSON text and message hashing as used by SSB feeds."""

import hashlib
import json
import math
from decimal import Decimal

from .errors import FeedError

_I64_MIN = -(2**63)
_U64_MAX = 2**64 - 1


def _quote(text):
    return json.dumps(text, ensure_ascii=False)


def _shortest_float(number):
    """Format a finite float with the shortest round-trip digits."""
    if number == 0:
        return "-0.0" if math.copysign(1.0, number) < 0 else "0.0"
    sign, digit_tuple, exponent = Decimal(repr(number)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    length = len(digits)
    point = length + exponent
    if 0 <= exponent and point <= 16:
        text = digits + "0" * exponent + ".0"
    elif 0 < point <= 16:
        text = digits[:point] + "." + digits[point:]
    elif -5 < point <= 0:
        text = "0." + "0" * -point + digits
    elif length == 1:
        text = f"{digits}e{point - 1}"
    else:
        text = f"{digits[0]}.{digits[1:]}e{point - 1}"
    return ("-" if sign else "") + text


def _format_number(number):
    if isinstance(number, int) and _I64_MIN <= number <= _U64_MAX:
        return str(number)
    try:
        number = float(number)
    except OverflowError as err:
        raise FeedError("invalid json") from err
    if not math.isfinite(number):
        raise FeedError("invalid json")
    text = _shortest_float(number)
    if "e" in text and "e-" not in text and "e+" not in text:
        text = text.replace("e", "e+")
    return text


def _render(value, level):
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (int, float)):
        return _format_number(value)

    inner = "  " * (level + 1)
    closing = "  " * level
    if isinstance(value, dict):
        if not value:
            return "{}"
        if not all(isinstance(key, str) for key in value):
            raise FeedError("invalid json")
        body = ",\n".join(
            f"{inner}{_quote(key)}: {_render(item, level + 1)}"
            for key, item in value.items()
        )
        return "{\n" + body + "\n" + closing + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        body = ",\n".join(f"{inner}{_render(item, level + 1)}" for item in value)
        return "[\n" + body + "\n" + closing + "]"
    raise FeedError("invalid json")


def stringify_json(value):
    """Render a JSON value the way ``JSON.stringify(value, null, 2)`` does."""
    return _render(value, 0)


def ssb_sha256(value):
    """Hash a JSON value as SSB does: low byte of each UTF-16 unit, then SHA-256."""
    utf16 = stringify_json(value).encode("utf-16-le")
    return hashlib.sha256(utf16[::2]).digest()