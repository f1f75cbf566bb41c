"""
Normalization of ``Assets.Account`` storage records.

The assets pallet changed the layout of its per-account record several times and
the decoded value carries no version tag, so each record is classified once into
one of the forms below, in this order, and the first match wins:

``REASON``
    Current layout. ``balance``, a freeze indicator (``is_frozen`` or, on newer
    runtimes, ``status``) and an ``ExistenceReason`` enum in ``reason``.
    Sufficiency comes from ``reason`` alone.
``SUFFICIENT``
    Older layout without ``reason``, exposing a truthy ``sufficient`` flag.
``LEGACY``
    Oldest layout, exposing ``is_sufficient``.
``ABSENT``
    No record, or a shape none of the above recognise.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

FROZEN_STATUSES = frozenset({'Frozen', 'Blocked'})
SUFFICIENT_REASON = 'Sufficient'


class AssetRecordForm(Enum):
    REASON = "reason"
    SUFFICIENT = "sufficient"
    LEGACY = "legacy"
    ABSENT = "absent"


@dataclass(frozen=True)
class ClassifiedAssetRecord:
    form: AssetRecordForm
    balance: Optional[int] = None
    is_frozen: Optional[bool] = None
    is_sufficient: Optional[bool] = None


ABSENT_RECORD = ClassifiedAssetRecord(AssetRecordForm.ABSENT)


@dataclass(frozen=True)
class AssetBalanceView:
    asset_id: Any
    balance: Optional[str]
    is_frozen: Optional[bool]
    is_sufficient: Optional[bool]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assetId": self.asset_id,
            "balance": self.balance,
            "isFrozen": self.is_frozen,
            "isSufficient": self.is_sufficient,
        }


def _is_sufficient_reason(reason: Any) -> bool:
    # Unit variants decode to their name, data-carrying variants to {name: data}
    if isinstance(reason, str):
        return reason == SUFFICIENT_REASON
    if isinstance(reason, Mapping):
        return SUFFICIENT_REASON in reason
    return False


def _classify_reason_form(raw: Mapping) -> Optional[ClassifiedAssetRecord]:
    if 'balance' not in raw or 'reason' not in raw:
        return None

    if 'is_frozen' in raw:
        is_frozen = bool(raw['is_frozen'])
    elif 'status' in raw:
        is_frozen = raw['status'] in FROZEN_STATUSES
    else:
        return None

    return ClassifiedAssetRecord(
        form=AssetRecordForm.REASON,
        balance=int(raw['balance']),
        is_frozen=is_frozen,
        is_sufficient=_is_sufficient_reason(raw['reason']),
    )


def _classify_flat_form(raw: Mapping, form: AssetRecordForm, sufficient_field: str) -> Optional[ClassifiedAssetRecord]:
    if 'balance' not in raw or 'is_frozen' not in raw:
        return None

    return ClassifiedAssetRecord(
        form=form,
        balance=int(raw['balance']),
        is_frozen=bool(raw['is_frozen']),
        is_sufficient=bool(raw[sufficient_field]),
    )


def classify_asset_record(raw: Optional[Any]) -> ClassifiedAssetRecord:
    """Classify a decoded ``Assets.Account`` value into exactly one record form."""
    if not isinstance(raw, Mapping):
        return ABSENT_RECORD

    classified = _classify_reason_form(raw)
    if classified is not None:
        return classified

    if raw.get('sufficient'):
        classified = _classify_flat_form(raw, AssetRecordForm.SUFFICIENT, 'sufficient')
        if classified is not None:
            return classified

    if 'is_sufficient' in raw:
        classified = _classify_flat_form(raw, AssetRecordForm.LEGACY, 'is_sufficient')
        if classified is not None:
            return classified

    return ABSENT_RECORD


def normalize_asset_balance(asset_id: Any, raw: Optional[Any]) -> AssetBalanceView:
    """
    Build the balance view for one asset of one account.

    Either all of balance, isFrozen and isSufficient are set or none of them is.
    The balance is rendered as a decimal string.
    """
    record = classify_asset_record(raw)
    if record.form is AssetRecordForm.ABSENT:
        return AssetBalanceView(asset_id=asset_id, balance=None, is_frozen=None, is_sufficient=None)

    return AssetBalanceView(
        asset_id=asset_id,
        balance=str(record.balance),
        is_frozen=record.is_frozen,
        is_sufficient=record.is_sufficient,
    )
