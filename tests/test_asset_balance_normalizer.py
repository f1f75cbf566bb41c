import pytest

from sidecar.api.services.asset_balance_normalizer import (
    AssetRecordForm,
    classify_asset_record,
    normalize_asset_balance,
)

MAX_U128 = 340282366920938463463374607431768211455


def _populated(view):
    return [view.balance is not None, view.is_frozen is not None, view.is_sufficient is not None]


@pytest.mark.parametrize("raw, expected_form", [
    ({"balance": 10, "is_frozen": False, "reason": "Sufficient", "extra": None}, AssetRecordForm.REASON),
    ({"balance": 10, "status": "Liquid", "reason": "Consumer", "extra": None}, AssetRecordForm.REASON),
    ({"balance": 10, "is_frozen": False, "sufficient": True, "extra": None}, AssetRecordForm.SUFFICIENT),
    ({"balance": 10, "is_frozen": False, "is_sufficient": False}, AssetRecordForm.LEGACY),
    (None, AssetRecordForm.ABSENT),
    ({"free": 10}, AssetRecordForm.ABSENT),
    ("not a record", AssetRecordForm.ABSENT),
])
def test_classify_asset_record_forms(raw, expected_form):
    """Every decoded record falls into exactly one form"""
    assert classify_asset_record(raw).form is expected_form


@pytest.mark.parametrize("raw", [
    {"balance": 10, "is_frozen": False, "reason": "Sufficient"},
    {"balance": 10, "status": "Frozen", "reason": {"DepositHeld": 5}},
    {"balance": 10, "is_frozen": True, "sufficient": True},
    {"balance": 10, "is_frozen": False, "is_sufficient": True},
    {"balance": 10, "is_frozen": False, "sufficient": False},
    {"balance": 10, "reason": "Sufficient"},
    None,
    {},
])
def test_normalized_fields_are_all_or_nothing(raw):
    """balance, isFrozen and isSufficient are never partially populated"""
    populated = _populated(normalize_asset_balance(1, raw))

    assert all(populated) or not any(populated)


def test_reason_takes_precedence_over_legacy_flag():
    """Sufficiency of a record with a reason comes from the reason only"""
    sufficient = {"balance": 1, "is_frozen": False, "reason": "Sufficient", "is_sufficient": False}
    consumer = {"balance": 1, "is_frozen": False, "reason": "Consumer", "is_sufficient": True}

    assert normalize_asset_balance(1, sufficient).is_sufficient is True
    assert normalize_asset_balance(1, consumer).is_sufficient is False


def test_reason_form_reads_status_for_frozen_flag():
    """Runtimes that replaced is_frozen with an account status still report frozen accounts"""
    assert normalize_asset_balance(1, {"balance": 1, "status": "Liquid", "reason": "Sufficient"}).is_frozen is False
    assert normalize_asset_balance(1, {"balance": 1, "status": "Frozen", "reason": "Sufficient"}).is_frozen is True
    assert normalize_asset_balance(1, {"balance": 1, "status": "Blocked", "reason": "Sufficient"}).is_frozen is True


def test_reason_with_data_variant():
    """Data-carrying ExistenceReason variants decode to a single-key mapping"""
    view = normalize_asset_balance(9, {"balance": 3, "is_frozen": False, "reason": {"DepositFrom": ["5G", 10]}})

    assert view.is_sufficient is False
    assert view.balance == "3"


def test_falsy_sufficient_falls_through_to_absent():
    """A record whose only sufficiency field is a false `sufficient` matches no form"""
    view = normalize_asset_balance(4, {"balance": 10, "is_frozen": False, "sufficient": False})

    assert view.to_dict() == {"assetId": 4, "balance": None, "isFrozen": None, "isSufficient": None}


def test_balance_rendered_as_decimal_string():
    """u128 balances survive as exact decimal strings"""
    view = normalize_asset_balance(3, {"balance": MAX_U128, "is_frozen": False, "is_sufficient": True})

    assert view.to_dict() == {
        "assetId": 3,
        "balance": "340282366920938463463374607431768211455",
        "isFrozen": False,
        "isSufficient": True,
    }
