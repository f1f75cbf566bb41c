import pytest
from pydantic import ValidationError

from sidecar.chains_config import (
    CacheOptions,
    ControllerConfig,
    LRUCache,
    get_controller_config,
    init_lru_cache,
    spec_to_controllers,
)
from sidecar.chains_config.crust_controllers import crust_controllers
from sidecar.chains_config.default_controllers import default_controllers


def test_lru_cache_evicts_least_recently_used():
    cache = LRUCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)

    # Reading "a" makes "b" the eviction candidate
    assert cache.get("a") == 1
    cache.set("c", 3)

    assert "b" not in cache
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_lru_cache_overwrite_refreshes_entry():
    cache = LRUCache(max_size=2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.get("a") == 10
    assert cache.get("b") is None
    assert cache.get("b", "missing") == "missing"


def test_lru_cache_rejects_non_positive_size():
    with pytest.raises(ValueError):
        LRUCache(max_size=0)


def test_init_lru_cache_uses_options():
    assert init_lru_cache().max_size == 500
    assert init_lru_cache(CacheOptions(max_size=3)).max_size == 3


def test_cache_options_validated():
    with pytest.raises(ValidationError):
        CacheOptions(max_size=0)


def test_controller_config_rejects_unknown_controller():
    with pytest.raises(ValidationError, match="Unknown controllers: AccountsTeleport"):
        ControllerConfig(controllers=["Blocks", "AccountsTeleport"])


def test_controller_config_rejects_duplicates():
    with pytest.raises(ValidationError, match="Duplicate controllers: Blocks"):
        ControllerConfig(controllers=["Blocks", "NodeVersion", "Blocks"])


def test_crust_declaration():
    assert crust_controllers.options.finalizes is True
    assert crust_controllers.options.min_calc_fee_runtime == 1
    assert crust_controllers.is_enabled("AccountsBalanceInfo")
    assert not crust_controllers.is_enabled("AccountsAssets")
    assert len(crust_controllers.controllers) == 15


def test_asset_hubs_enable_assets_controller():
    for spec_name in ("statemint", "statemine", "westmint"):
        assert get_controller_config(spec_name).is_enabled("AccountsAssets")


def test_unknown_spec_falls_back_to_default():
    assert get_controller_config("some-solochain") is default_controllers
    assert get_controller_config("Crust") is crust_controllers


def test_with_cache_size_copies_config():
    resized = spec_to_controllers["polkadot"].with_cache_size(10)

    assert resized.options.block_store.max_size == 10
    assert spec_to_controllers["polkadot"].options.block_store.max_size == 500
    assert spec_to_controllers["polkadot"].with_cache_size(None) is spec_to_controllers["polkadot"]
