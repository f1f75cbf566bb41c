"""
JSON sanitizing for API responses.

Storage values decoded by scalecodec routinely carry u128 balances, which lose
precision in JavaScript clients once serialized as JSON numbers. Before a
response leaves the API every big integer in it is rendered as a decimal string.
"""

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from scalecodec.base import ScaleType

# Largest integer a JSON consumer using IEEE-754 doubles represents exactly
MAX_SAFE_INTEGER = 2 ** 53 - 1


class ValueKind(Enum):
    BIG_INT = "big_int"
    RAW_WRAPPER = "raw_wrapper"
    SELF_SERIALIZING = "self_serializing"
    ARRAY = "array"
    MAPPING = "mapping"
    SCALAR = "scalar"


def _is_codec_int(value: Any) -> bool:
    if not isinstance(value, ScaleType):
        return False
    decoded = value.value
    return isinstance(decoded, int) and not isinstance(decoded, bool)


def _is_big_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return abs(value) > MAX_SAFE_INTEGER
    return _is_codec_int(value)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or _is_codec_int(value)


def _raw_value(value: Any) -> Optional[Any]:
    if isinstance(value, Mapping):
        return value.get('raw')
    if isinstance(value, ScaleType):
        return None
    return getattr(value, 'raw', None)


def _serializer(value: Any) -> Optional[Callable[[], Any]]:
    if isinstance(value, ScaleType):
        return lambda: value.value
    for name in ('serialize', 'to_json'):
        method = getattr(value, name, None)
        if callable(method):
            return method
    return None


def classify_value(value: Any) -> ValueKind:
    """Decide which sanitizing rule applies to a value, in precedence order."""
    if _is_big_int(value):
        return ValueKind.BIG_INT
    if isinstance(value, (str, bytes, bool, int, float)) or value is None:
        return ValueKind.SCALAR
    if _is_integer(_raw_value(value)):
        return ValueKind.RAW_WRAPPER
    if _serializer(value) is not None:
        return ValueKind.SELF_SERIALIZING
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.SCALAR


def _big_int_to_string(value: Any) -> str:
    if isinstance(value, ScaleType):
        value = value.value
    return str(value)


_HANDLERS: Dict[ValueKind, Callable[[Any], Any]] = {
    ValueKind.BIG_INT: _big_int_to_string,
    ValueKind.RAW_WRAPPER: lambda value: _big_int_to_string(_raw_value(value)),
    ValueKind.SELF_SERIALIZING: lambda value: sanitize_numbers(_serializer(value)()),
    ValueKind.ARRAY: lambda value: [sanitize_numbers(item) for item in value],
    ValueKind.MAPPING: lambda value: {key: sanitize_numbers(item) for key, item in value.items()},
    ValueKind.SCALAR: lambda value: value,
}


def sanitize_numbers(data: Any) -> Any:
    """
    Return a copy of ``data`` that is safe to serialize as JSON.

    Big integers (SCALE codec integers, or Python ints beyond the safe-integer
    range) become decimal strings. Any integer wrapped under a ``raw`` key or
    attribute collapses to its decimal string. Objects that serialize themselves
    are serialized first and the result is sanitized. Lists and mappings are
    rebuilt element by element with keys and order kept.
    Everything else is returned as is.

    The input is never mutated, and sanitizing an already sanitized value
    returns an equal value.
    """
    return _HANDLERS[classify_value(data)](data)
