from typing import Dict
from loguru import logger

from sidecar.chains_config.controller_config import ControllerConfig, ControllerOptions, CacheOptions
from sidecar.chains_config.cache import LRUCache, init_lru_cache
from sidecar.chains_config.default_controllers import default_controllers
from sidecar.chains_config.crust_controllers import crust_controllers
from sidecar.chains_config.relay_controllers import polkadot_controllers, kusama_controllers, westend_controllers
from sidecar.chains_config.asset_hub_controllers import (
    statemint_controllers, statemine_controllers, westmint_controllers
)

spec_to_controllers: Dict[str, ControllerConfig] = {
    'polkadot': polkadot_controllers,
    'kusama': kusama_controllers,
    'westend': westend_controllers,
    'statemint': statemint_controllers,
    'statemine': statemine_controllers,
    'westmint': westmint_controllers,
    'crust': crust_controllers,
}


def get_controller_config(spec_name: str) -> ControllerConfig:
    """Controller declaration for a runtime spec name, `default` when there is none."""
    config = spec_to_controllers.get(spec_name.lower())
    if config is None:
        logger.warning(f"No controller config for spec name {spec_name}, using default")
        return default_controllers
    return config
