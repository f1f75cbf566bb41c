import re
import time
import threading
from typing import Any, List, Optional, Union
from loguru import logger
from substrateinterface import SubstrateInterface

from sidecar.base.enhanced_logging import ErrorContextManager, classify_error
from sidecar.base.errors import InvalidParameter
from sidecar.base.metrics import StorageQueryMetrics
from sidecar.chains_config import ControllerConfig, LRUCache, init_lru_cache
from sidecar.substrate.node.chain_state import ChainSnapshot, ChainState
from sidecar.substrate.node.substrate_interface_factory import SubstrateInterfaceFactory

BLOCK_HASH_PATTERN = re.compile(r'^0x[0-9a-fA-F]{64}$')

QUERY_MAP_PAGE_SIZE = 1000


class SubstrateChainState(ChainState):
    """
    ChainState backed by py-substrate-interface.

    The websocket client inside SubstrateInterface is not safe to share between
    threads, so every executor thread lazily opens its own interface. Block
    heights are immutable per hash and are kept in the controller config's block
    store.
    """

    def __init__(self, network: str, node_ws_url: str, controller_config: ControllerConfig,
                 block_store: Optional[LRUCache] = None, metrics: Optional[StorageQueryMetrics] = None):
        self.network = network
        self.node_ws_url = node_ws_url
        self.finalizes = controller_config.options.finalizes
        if block_store is None:
            block_store = init_lru_cache(controller_config.options.block_store)
        self.block_store = block_store
        self.metrics = metrics
        self._error_ctx = ErrorContextManager(f"{network}-chain-state")

        self._local = threading.local()
        self._interfaces: List[SubstrateInterface] = []
        self._interfaces_lock = threading.Lock()

        logger.info(
            "Substrate chain state initialized",
            extra={
                "network": network,
                "endpoint": node_ws_url,
                "finalizes": self.finalizes,
                "block_store_size": self.block_store.max_size
            }
        )

    def _substrate(self) -> SubstrateInterface:
        substrate = getattr(self._local, 'substrate', None)
        if substrate is None:
            substrate = SubstrateInterfaceFactory.create_substrate_interface(self.network, self.node_ws_url)
            self._local.substrate = substrate
            with self._interfaces_lock:
                self._interfaces.append(substrate)
        return substrate

    def close(self):
        with self._interfaces_lock:
            for substrate in self._interfaces:
                try:
                    substrate.close()
                except Exception as e:
                    logger.warning(f"Error closing substrate connection: {e}")
            self._interfaces.clear()

    def resolve_snapshot(self, at: Optional[Union[str, int]] = None) -> ChainSnapshot:
        if isinstance(at, str):
            if BLOCK_HASH_PATTERN.match(at):
                return ChainSnapshot(block_hash=at)
            if not at.isdigit():
                raise InvalidParameter(f"Cannot parse 'at' value {at!r}: expected a block hash or a block height")
            at = int(at)

        try:
            substrate = self._substrate()
            if at is None:
                block_hash = substrate.get_chain_finalised_head() if self.finalizes else substrate.get_chain_head()
            else:
                block_hash = substrate.get_block_hash(at)
        except Exception as e:
            self._error_ctx.log_error(
                "Failed to resolve block hash",
                e,
                at=at,
                endpoint=self.node_ws_url,
                network=self.network,
                error_category=classify_error(e)
            )
            raise RuntimeError(f"Failed to resolve block hash for {at}: {e}")

        if not block_hash:
            raise InvalidParameter(f"No block found at height {at}")

        return ChainSnapshot(block_hash=block_hash)

    def has_storage(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> bool:
        try:
            storage = self._substrate().get_metadata_storage_function(
                module, storage_function, block_hash=snapshot.block_hash
            )
        except Exception as e:
            self._error_ctx.log_error(
                "Failed to read runtime metadata",
                e,
                block_hash=snapshot.block_hash,
                module=module,
                storage_function=storage_function,
                network=self.network,
                error_category=classify_error(e)
            )
            raise RuntimeError(f"Failed to read metadata at {snapshot.block_hash}: {e}")
        return storage is not None

    def query(self, snapshot: ChainSnapshot, module: str, storage_function: str,
              params: List[Any]) -> Optional[Any]:
        start_time = time.time()
        try:
            result = self._substrate().query(module, storage_function, params, block_hash=snapshot.block_hash)
        except Exception as e:
            self._error_ctx.log_error(
                "Storage query failed",
                e,
                block_hash=snapshot.block_hash,
                module=module,
                storage_function=storage_function,
                params=[str(param) for param in params],
                network=self.network,
                error_category=classify_error(e)
            )
            raise RuntimeError(f"Failed to query {module}.{storage_function} at {snapshot.block_hash}: {e}")
        finally:
            if self.metrics:
                self.metrics.record_query(module, storage_function, time.time() - start_time)

        if result is None:
            return None
        return result.value

    def query_keys(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> List[Any]:
        start_time = time.time()
        keys = []
        try:
            result = self._substrate().query_map(
                module, storage_function, block_hash=snapshot.block_hash, page_size=QUERY_MAP_PAGE_SIZE
            )
            for key, _ in result:
                # Multi-key maps yield a tuple of key components
                if isinstance(key, tuple):
                    key = key[0]
                keys.append(key.value)
        except Exception as e:
            self._error_ctx.log_error(
                "Storage key enumeration failed",
                e,
                block_hash=snapshot.block_hash,
                module=module,
                storage_function=storage_function,
                keys_read=len(keys),
                network=self.network,
                error_category=classify_error(e)
            )
            raise RuntimeError(f"Failed to enumerate {module}.{storage_function} at {snapshot.block_hash}: {e}")
        finally:
            if self.metrics:
                self.metrics.record_query(module, storage_function, time.time() - start_time)

        logger.debug(f"Enumerated {len(keys)} keys of {module}.{storage_function} at {snapshot.block_hash}")
        return keys

    def get_block_height(self, snapshot: ChainSnapshot) -> int:
        height = self.block_store.get(snapshot.block_hash)
        if height is not None:
            return height

        try:
            height = self._substrate().get_block_number(snapshot.block_hash)
        except Exception as e:
            self._error_ctx.log_error(
                "Failed to fetch block header",
                e,
                block_hash=snapshot.block_hash,
                endpoint=self.node_ws_url,
                network=self.network,
                rpc_method="chain_getHeader",
                error_category=classify_error(e)
            )
            raise RuntimeError(f"Failed to fetch header for {snapshot.block_hash}: {e}")

        if height is None:
            raise InvalidParameter(f"No block found with hash {snapshot.block_hash}")

        self.block_store.set(snapshot.block_hash, height)
        return height
