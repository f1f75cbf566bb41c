from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Union


@dataclass(frozen=True)
class ChainSnapshot:
    """Chain storage as of the block identified by ``block_hash``."""
    block_hash: str


class ChainState(ABC):
    """Read-only access to historical chain storage."""

    @abstractmethod
    def resolve_snapshot(self, at: Optional[Union[str, int]] = None) -> ChainSnapshot:
        """Resolve a block hash, block height or None (head) to a snapshot"""
        ...

    @abstractmethod
    def has_storage(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> bool:
        """Whether the runtime at the snapshot declares the storage function"""
        ...

    @abstractmethod
    def query(self, snapshot: ChainSnapshot, module: str, storage_function: str,
              params: List[Any]) -> Optional[Any]:
        """Decoded storage value for the key, None when nothing is stored"""
        ...

    @abstractmethod
    def query_keys(self, snapshot: ChainSnapshot, module: str, storage_function: str) -> List[Any]:
        """First key component of every entry in a storage map"""
        ...

    @abstractmethod
    def get_block_height(self, snapshot: ChainSnapshot) -> int:
        """Block number of the snapshot's header"""
        ...
