"""
Deep key-casing conversion between the wire and internal conventions.

The backend speaks snake_case; everything above the transport uses
camelCase keys. Conversion recurses through dicts, lists and tuples.
Scalars and other objects (datetime, Decimal, ...) pass through untouched.

Round trip ``to_internal(to_wire(v)) == v`` holds for camelCase keys made of
ASCII letters and digits with no adjacent uppercase letters. Keys with
leading, trailing or doubled underscores, or non-ASCII letters, are not
guaranteed to survive a round trip.
"""

import re
from typing import Any, Callable

_SNAKE_SEGMENT = re.compile(r"_([a-z])")
_UPPER_LETTER = re.compile(r"[A-Z]")


def snake_to_camel(key: str) -> str:
    """``"physical_location_id"`` -> ``"physicalLocationId"``."""
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key)


def camel_to_snake(key: str) -> str:
    """``"physicalLocationId"`` -> ``"physical_location_id"``."""
    return _UPPER_LETTER.sub(lambda m: "_" + m.group(0).lower(), key)


def _deep_convert_keys(value: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(value, dict):
        return {
            (convert(k) if isinstance(k, str) else k): _deep_convert_keys(v, convert)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_deep_convert_keys(item, convert) for item in value]
    if isinstance(value, tuple):
        return tuple(_deep_convert_keys(item, convert) for item in value)
    return value


def to_internal(value: Any) -> Any:
    """Rewrite every dict key from snake_case to camelCase, recursively."""
    return _deep_convert_keys(value, snake_to_camel)


def to_wire(value: Any) -> Any:
    """Rewrite every dict key from camelCase to snake_case, recursively."""
    return _deep_convert_keys(value, camel_to_snake)
