import asyncio
import contextvars
import functools
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
from loguru import logger

from sidecar.api.services.asset_balance_normalizer import AssetBalanceView, normalize_asset_balance
from sidecar.base.errors import ConfigurationUnsupported
from sidecar.base.metrics import StorageQueryMetrics
from sidecar.substrate.node.chain_state import ChainSnapshot, ChainState

ASSETS_MODULE = 'Assets'
ACCOUNT_STORAGE = 'Account'
APPROVALS_STORAGE = 'Approvals'


@dataclass(frozen=True)
class AtDescriptor:
    hash: str
    height: str

    def to_dict(self) -> Dict[str, str]:
        return {"hash": self.hash, "height": self.height}


@dataclass(frozen=True)
class AssetApprovalView:
    at: AtDescriptor
    amount: Optional[str]
    deposit: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "at": self.at.to_dict(),
            "amount": self.amount,
            "deposit": self.deposit,
        }


@dataclass(frozen=True)
class AccountAssetsBalances:
    at: AtDescriptor
    assets: List[AssetBalanceView]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "at": self.at.to_dict(),
            "assets": [asset.to_dict() for asset in self.assets],
        }


class AccountsAssetsService:
    """
    Asset balances and approvals of an account, read from the assets pallet at a
    given block.

    Storage lookups are blocking calls into the chain-state accessor. They are
    pushed onto an executor, the loop default when none is given, and awaited
    together, so the lookups for one request overlap instead of running back to
    back.
    """

    def __init__(self, chain_state: ChainState, executor: Optional[Executor] = None,
                 metrics: Optional[StorageQueryMetrics] = None):
        self.chain_state = chain_state
        self.executor = executor
        self.metrics = metrics

    async def _run(self, func: Callable, *args):
        loop = asyncio.get_running_loop()
        # Executor threads do not inherit the caller's context vars
        context = contextvars.copy_context()
        return await loop.run_in_executor(self.executor, functools.partial(context.run, func, *args))

    async def resolve_snapshot(self, at: Optional[Union[str, int]] = None) -> ChainSnapshot:
        """Resolve an ``at`` query value (hash, height or None for the head) to a snapshot."""
        return await self._run(self.chain_state.resolve_snapshot, at)

    async def fetch_asset_balances(self, snapshot: ChainSnapshot, account_id: str,
                                   asset_ids: Sequence[int]) -> AccountAssetsBalances:
        """
        Fetch the balance of every requested asset held by an account.

        Args:
            snapshot: Block to read storage at
            account_id: Account holding the balances
            asset_ids: Assets to query, in the order they should be returned.
                When empty, every asset id found in ``Assets.Account`` is queried.

        Returns:
            The balances, one per requested asset, and the block they were read at

        Raises:
            ConfigurationUnsupported: The runtime at the block has no assets pallet
        """
        await self._check_assets_pallet(snapshot, ACCOUNT_STORAGE)

        if not asset_ids:
            asset_ids = await self._discover_asset_ids(snapshot)

        at, assets = await asyncio.gather(
            self._resolve_at(snapshot),
            self.query_assets(snapshot, asset_ids, account_id)
        )

        return AccountAssetsBalances(at=at, assets=assets)

    async def fetch_asset_approval(self, snapshot: ChainSnapshot, owner: str, asset_id: int,
                                   delegate: str) -> AssetApprovalView:
        """
        Fetch the allowance ``owner`` granted ``delegate`` over one asset.

        Amount and deposit are both null when no approval is stored.

        Raises:
            ConfigurationUnsupported: The runtime at the block has no assets pallet
        """
        await self._check_assets_pallet(snapshot, APPROVALS_STORAGE)

        at, approval = await asyncio.gather(
            self._resolve_at(snapshot),
            self._run(self.chain_state.query, snapshot, ASSETS_MODULE, APPROVALS_STORAGE,
                      [asset_id, owner, delegate])
        )

        amount = deposit = None
        if isinstance(approval, Mapping) and 'amount' in approval and 'deposit' in approval:
            amount = str(approval['amount'])
            deposit = str(approval['deposit'])

        return AssetApprovalView(at=at, amount=amount, deposit=deposit)

    async def query_assets(self, snapshot: ChainSnapshot, asset_ids: Sequence[int],
                           account_id: str) -> List[AssetBalanceView]:
        """Query every asset balance of an account concurrently, keeping the order of ``asset_ids``."""
        return list(await asyncio.gather(*[
            self._fetch_asset_balance(snapshot, asset_id, account_id) for asset_id in asset_ids
        ]))

    async def _fetch_asset_balance(self, snapshot: ChainSnapshot, asset_id: int,
                                   account_id: str) -> AssetBalanceView:
        raw = await self._run(
            self.chain_state.query, snapshot, ASSETS_MODULE, ACCOUNT_STORAGE, [asset_id, account_id]
        )
        return normalize_asset_balance(asset_id, raw)

    async def _discover_asset_ids(self, snapshot: ChainSnapshot) -> List[int]:
        keys = await self._run(self.chain_state.query_keys, snapshot, ASSETS_MODULE, ACCOUNT_STORAGE)
        # Account is keyed (asset, who): one asset id repeats for every holder
        asset_ids = list(dict.fromkeys(keys))
        logger.bind(storage_keys=len(keys), block_hash=snapshot.block_hash).debug(
            f"Discovered {len(asset_ids)} asset ids at {snapshot.block_hash}"
        )
        return asset_ids

    async def _resolve_at(self, snapshot: ChainSnapshot) -> AtDescriptor:
        height = await self._run(self.chain_state.get_block_height, snapshot)
        return AtDescriptor(hash=snapshot.block_hash, height=str(height))

    async def _check_assets_pallet(self, snapshot: ChainSnapshot, storage_function: str):
        if await self._run(self.chain_state.has_storage, snapshot, ASSETS_MODULE, storage_function):
            return

        if self.metrics:
            self.metrics.record_pallet_missing(ASSETS_MODULE)
        raise ConfigurationUnsupported("The runtime does not include the assets pallet at this block.")
