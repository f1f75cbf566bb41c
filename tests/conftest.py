import threading
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from sidecar.base.errors import InvalidParameter
from sidecar.substrate.node.chain_state import ChainSnapshot, ChainState

HEAD_HASH = "0x" + "ab" * 32
OLD_HASH = "0x" + "cd" * 32

ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
BOB = "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty"
CHARLIE = "5FLSigC9HGRKVhB9FiEo4Y3koPsNmBmLJbpXg2mp1hXcS59Y"


class FakeChainState(ChainState):
    """In-memory chain storage for a handful of blocks."""

    def __init__(self,
                 accounts: Optional[Dict[Tuple[int, str], Any]] = None,
                 approvals: Optional[Dict[Tuple[int, str, str], Any]] = None,
                 heights: Optional[Dict[str, int]] = None,
                 blocks_without_assets: Optional[List[str]] = None,
                 failing_assets: Optional[List[int]] = None):
        self.accounts = accounts or {}
        self.approvals = approvals or {}
        self.heights = heights or {HEAD_HASH: 5_000_000, OLD_HASH: 100}
        self.blocks_without_assets = blocks_without_assets or []
        self.failing_assets = failing_assets or []
        self.calls: List[Tuple] = []
        self._lock = threading.Lock()

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def resolve_snapshot(self, at: Optional[Union[str, int]] = None) -> ChainSnapshot:
        if at is None:
            return ChainSnapshot(HEAD_HASH)
        if isinstance(at, str) and at.startswith("0x"):
            return ChainSnapshot(at)
        if isinstance(at, str) and not at.isdigit():
            raise InvalidParameter(f"Cannot parse 'at' value {at!r}")
        for block_hash, height in self.heights.items():
            if height == int(at):
                return ChainSnapshot(block_hash)
        raise InvalidParameter(f"No block found at height {at}")

    def has_storage(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> bool:
        self._record("has_storage", snapshot.block_hash, module, storage_function)
        return snapshot.block_hash not in self.blocks_without_assets

    def query(self, snapshot: ChainSnapshot, module: str, storage_function: str, params: List[Any]):
        self._record("query", snapshot.block_hash, module, storage_function, tuple(params))
        if storage_function == "Account":
            if params[0] in self.failing_assets:
                raise ConnectionError("websocket closed")
            return self.accounts.get(tuple(params))
        if storage_function == "Approvals":
            return self.approvals.get(tuple(params))
        return None

    def query_keys(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> List[Any]:
        self._record("query_keys", snapshot.block_hash, module, storage_function)
        return [asset_id for asset_id, _ in self.accounts]

    def get_block_height(self, snapshot: ChainSnapshot) -> int:
        self._record("get_block_height", snapshot.block_hash)
        return self.heights[snapshot.block_hash]


def reason_record(balance: int, reason: Any = "Sufficient", **extra) -> Dict[str, Any]:
    record = {"balance": balance, "status": "Liquid", "reason": reason, "extra": None}
    record.update(extra)
    return record


@pytest.fixture
def chain_state():
    """
    Chain with three holders spread over assets 1, 3 and 7 and one approval.
    """
    return FakeChainState(
        accounts={
            (1, ALICE): reason_record(1_000_000_000_000),
            (3, ALICE): reason_record(340282366920938463463374607431768211455, reason={"DepositHeld": 100}),
            (3, BOB): reason_record(42, reason="Consumer"),
            (7, BOB): {"balance": 7, "is_frozen": True, "sufficient": True, "extra": None},
        },
        approvals={
            (3, ALICE, BOB): {"amount": 500, "deposit": 2_000_000_000},
        },
    )
