import os
from dotenv import load_dotenv
from .enhanced_logging import (
    setup_enhanced_logger, ErrorContextManager, classify_error,
    generate_correlation_id, get_correlation_id, set_correlation_id,
    log_service_start, log_service_stop
)
from .metrics import setup_metrics, MetricsRegistry, StorageQueryMetrics


load_dotenv()


def get_sidecar_settings(network: str):
    """Runtime settings for the API process, read from the environment."""
    cache_size = os.getenv("SIDECAR_CACHE_SIZE")

    settings = {
        "network": network,
        "spec_name": os.getenv("SIDECAR_SPEC_NAME", network).lower(),
        "max_workers": int(os.getenv("SIDECAR_MAX_WORKERS", "4")),
        "cache_size": int(cache_size) if cache_size else None,
        "log_level": os.getenv("SIDECAR_LOG_LEVEL", "INFO").upper(),
        "logs_dir": os.getenv("SIDECAR_LOGS_DIR"),
    }

    if settings["max_workers"] < 1:
        raise ValueError(f"SIDECAR_MAX_WORKERS must be positive, got {settings['max_workers']}")

    return settings
