import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST
from loguru import logger

from sidecar.api.middleware.correlation_middleware import CorrelationMiddleware
from sidecar.api.routers import CONTROLLER_ROUTERS
from sidecar.base import get_sidecar_settings, ErrorContextManager, classify_error, log_service_stop
from sidecar.base.metrics import MetricsRegistry, StorageQueryMetrics
from sidecar.chains_config import get_controller_config
from sidecar.substrate import get_substrate_node_url
from sidecar.substrate.node.chain_state import ChainState
from sidecar.substrate.node.substrate_chain_state import SubstrateChainState

version = "0.1.0"


def create_app(chain_state: Optional[ChainState] = None, settings: Optional[Dict[str, Any]] = None,
               metrics_registry: Optional[MetricsRegistry] = None) -> FastAPI:
    """
    Build the API for one chain.

    Args:
        chain_state: Storage accessor, a SubstrateChainState for the configured
            network when not given
        settings: Settings as returned by get_sidecar_settings, read from the
            environment when not given
        metrics_registry: Registry to export on /metrics

    Returns:
        FastAPI: App with the routers of every enabled controller mounted
    """
    if settings is None:
        settings = get_sidecar_settings(os.getenv("NETWORK", "polkadot").lower())

    network = settings["network"]
    service_name = f"{network}-assets-sidecar"
    controller_config = get_controller_config(settings["spec_name"]).with_cache_size(settings.get("cache_size"))

    if metrics_registry is None:
        metrics_registry = MetricsRegistry(service_name, version)
    storage_metrics = StorageQueryMetrics(metrics_registry)
    error_ctx = ErrorContextManager(service_name)

    if chain_state is None:
        chain_state = SubstrateChainState(
            network,
            get_substrate_node_url(network),
            controller_config,
            metrics=storage_metrics
        )

    executor = ThreadPoolExecutor(max_workers=settings["max_workers"], thread_name_prefix="chain-state")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        executor.shutdown(wait=False)
        close = getattr(chain_state, "close", None)
        if callable(close):
            close()
        log_service_stop(service_name)

    app = FastAPI(
        title="Substrate Assets Sidecar",
        description="REST access to assets pallet balances and approvals of a Substrate chain",
        version=version,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.state.chain_state = chain_state
    app.state.executor = executor
    app.state.storage_metrics = storage_metrics
    app.state.controller_config = controller_config
    app.state.error_ctx = error_ctx

    app.add_middleware(CorrelationMiddleware)

    for controller, router in CONTROLLER_ROUTERS.items():
        if controller_config.is_enabled(controller):
            app.include_router(router)
            logger.info(f"Mounted controller {controller}")
        else:
            logger.info(f"Controller {controller} disabled for spec {settings['spec_name']}")

    @app.get("/metrics")
    async def metrics_endpoint():
        try:
            return Response(content=metrics_registry.get_metrics_text(), media_type=CONTENT_TYPE_LATEST)
        except Exception as e:
            error_ctx.log_error(
                "Metrics export failed",
                error=e,
                operation="metrics_export",
                error_category=classify_error(e)
            )
            return JSONResponse(
                status_code=503,
                content={"error": "Metrics export failed"}
            )

    @app.get("/health")
    async def health_check():
        return {
            "status": "ok",
            "version": version,
            "network": network,
            "controllers": [name for name in CONTROLLER_ROUTERS if controller_config.is_enabled(name)]
        }

    return app
