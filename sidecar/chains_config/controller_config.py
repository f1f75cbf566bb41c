from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Every controller a chain config may name. Only some of them are served by this
# API, the rest belong to sibling deployments sharing the same declarations.
KNOWN_CONTROLLERS = frozenset({
    'AccountsAssets',
    'AccountsBalanceInfo',
    'AccountsStakingInfo',
    'AccountsStakingPayouts',
    'AccountsValidate',
    'AccountsVestingInfo',
    'Blocks',
    'BlocksExtrinsics',
    'BlocksTrace',
    'NodeNetwork',
    'NodeTransactionPool',
    'NodeVersion',
    'PalletsAssets',
    'PalletsStakingProgress',
    'PalletsStorage',
    'Paras',
    'RuntimeCode',
    'RuntimeMetadata',
    'RuntimeSpec',
    'TransactionDryRun',
    'TransactionFeeEstimate',
    'TransactionMaterial',
    'TransactionSubmit',
})


class CacheOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_size: int = Field(500, description="Maximum number of cached entries", gt=0)


class ControllerOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    finalizes: bool = Field(True, description="Whether the chain has deterministic finality")
    min_calc_fee_runtime: Optional[int] = Field(
        None, description="First runtime version the fee calculator supports", ge=0
    )
    block_weight_store: Dict[str, Any] = Field(default_factory=dict)
    block_store: CacheOptions = Field(default_factory=CacheOptions)


class ControllerConfig(BaseModel):
    """Which controllers a deployment mounts and how their shared state is sized."""
    model_config = ConfigDict(frozen=True)

    controllers: List[str]
    options: ControllerOptions = Field(default_factory=ControllerOptions)

    @field_validator('controllers')
    @classmethod
    def validate_controllers(cls, controllers: List[str]) -> List[str]:
        unknown = [name for name in controllers if name not in KNOWN_CONTROLLERS]
        if unknown:
            raise ValueError(f"Unknown controllers: {', '.join(unknown)}")

        duplicates = sorted({name for name in controllers if controllers.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate controllers: {', '.join(duplicates)}")

        return controllers

    def is_enabled(self, controller: str) -> bool:
        return controller in self.controllers

    def with_cache_size(self, max_size: Optional[int]) -> "ControllerConfig":
        """Copy of this config with the block store resized, unchanged when max_size is None."""
        if max_size is None:
            return self
        options = self.options.model_copy(update={"block_store": CacheOptions(max_size=max_size)})
        return self.model_copy(update={"options": options})
