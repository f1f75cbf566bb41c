import copy

from scalecodec.base import ScaleBytes
from scalecodec.types import U128

from sidecar.api.utils.sanitize_numbers import ValueKind, classify_value, sanitize_numbers

MAX_U128 = 340282366920938463463374607431768211455


class Wrapper:
    def __init__(self, raw):
        self.raw = raw


class Serializable:
    def __init__(self, fields):
        self.fields = fields
        self.hidden = 2 ** 70

    def serialize(self):
        return dict(self.fields)


def _u128(value: int) -> U128:
    obj = U128(ScaleBytes(bytearray(value.to_bytes(16, byteorder="little"))))
    obj.decode()
    return obj


def test_raw_wrapper_in_mapping():
    """A {raw: bigint} wrapper collapses to the decimal string"""
    assert sanitize_numbers({"a": {"raw": MAX_U128}}) == {"a": "340282366920938463463374607431768211455"}


def test_raw_wrapper_object():
    assert sanitize_numbers([Wrapper(MAX_U128)]) == [str(MAX_U128)]


def test_raw_wrapper_collapses_whatever_the_magnitude():
    """Small and big integers under raw come out the same shape"""
    assert sanitize_numbers({"a": {"raw": 5}, "b": {"raw": 2 ** 60}, "c": {"raw": _u128(9)}}) == {
        "a": "5",
        "b": "1152921504606846976",
        "c": "9",
    }


def test_codec_integers_always_become_strings():
    """SCALE integers are stringified whatever their magnitude"""
    assert sanitize_numbers({"big": _u128(MAX_U128), "small": _u128(5)}) == {
        "big": str(MAX_U128),
        "small": "5",
    }


def test_plain_ints_beyond_safe_range():
    """Python ints stay numbers while a double can hold them exactly"""
    assert sanitize_numbers([2 ** 53 - 1, 2 ** 53, -(2 ** 60)]) == [2 ** 53 - 1, str(2 ** 53), str(-(2 ** 60))]


def test_booleans_and_scalars_unchanged():
    data = {"flag": True, "ratio": 0.5, "name": "DOT", "nothing": None, "count": 3}

    assert sanitize_numbers(data) == data


def test_self_serializing_uses_serialized_fields():
    """Only what serialize() reports is kept, and it is sanitized in turn"""
    value = Serializable({"amount": 2 ** 64, "symbol": "USDT"})

    assert sanitize_numbers({"asset": value}) == {"asset": {"amount": str(2 ** 64), "symbol": "USDT"}}


def test_nested_structure_preserves_keys_and_order():
    data = {"z": [1, {"b": 2 ** 80, "a": [2 ** 90]}], "y": (3, 4)}

    result = sanitize_numbers(data)

    assert result == {"z": [1, {"b": str(2 ** 80), "a": [str(2 ** 90)]}], "y": [3, 4]}
    assert list(result) == ["z", "y"]
    assert list(result["z"][1]) == ["b", "a"]


def test_sanitize_is_idempotent():
    data = {
        "balances": [_u128(MAX_U128), {"raw": 2 ** 100}, 7],
        "nested": {"deep": [{"value": 2 ** 64}, "text", None]},
    }

    once = sanitize_numbers(data)

    assert sanitize_numbers(once) == once


def test_sanitize_does_not_mutate_input():
    data = {"a": [2 ** 64, {"raw": MAX_U128}], "b": {"c": 2 ** 70}}
    snapshot = copy.deepcopy(data)

    sanitize_numbers(data)

    assert data == snapshot


def test_classification_precedence():
    """Big integers before raw wrappers before serializers before containers"""
    assert classify_value(MAX_U128) is ValueKind.BIG_INT
    assert classify_value({"raw": MAX_U128}) is ValueKind.RAW_WRAPPER
    assert classify_value({"raw": 1}) is ValueKind.RAW_WRAPPER
    assert classify_value({"raw": True}) is ValueKind.MAPPING
    assert classify_value({"raw": "1"}) is ValueKind.MAPPING
    assert classify_value(Serializable({})) is ValueKind.SELF_SERIALIZING
    assert classify_value((1, 2)) is ValueKind.ARRAY
    assert classify_value(True) is ValueKind.SCALAR
    assert classify_value(1.5) is ValueKind.SCALAR
