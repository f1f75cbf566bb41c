from sidecar.api.app import create_app, version
from sidecar.base import (
    get_sidecar_settings, setup_enhanced_logger, setup_metrics, log_service_start
)
import os

network = os.getenv("NETWORK", "polkadot").lower()
service_name = f"{network}-assets-sidecar"
settings = get_sidecar_settings(network)

setup_enhanced_logger(service_name, logs_dir=settings["logs_dir"], level=settings["log_level"])
metrics_registry = setup_metrics(service_name, version=version)

log_service_start(
    service_name,
    version=version,
    network=network,
    spec_name=settings["spec_name"],
    max_workers=settings["max_workers"],
    cache_size=settings["cache_size"]
)

app = create_app(settings=settings, metrics_registry=metrics_registry)
