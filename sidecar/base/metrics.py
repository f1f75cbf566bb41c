import threading
from typing import Dict
from prometheus_client import (
    CollectorRegistry, Counter, Histogram, Gauge, Info, generate_latest
)
from loguru import logger

# Global metrics registry per service
_service_registries: Dict[str, "MetricsRegistry"] = {}
_metrics_lock = threading.Lock()


class MetricsRegistry:
    """Metrics registry for one service, exported on the API's /metrics route"""

    def __init__(self, service_name: str, version: str = "0.1.0"):
        self.service_name = service_name
        self.registry = CollectorRegistry()
        self.version = version

        self._init_common_metrics()

    def _init_common_metrics(self):
        """Initialize common metrics available to all services"""
        self.service_info = Info(
            'service_info',
            'Service information',
            registry=self.registry
        )
        self.service_info.info({
            'service_name': self.service_name,
            'version': self.version,
            'component': 'api',
        })

        self.service_start_time = Gauge(
            'service_start_time_seconds',
            'Service start time in Unix timestamp',
            registry=self.registry
        )
        self.service_start_time.set_to_current_time()

    def create_counter(self, name: str, description: str, labelnames: list = None) -> Counter:
        return Counter(
            name, description,
            labelnames or [],
            registry=self.registry
        )

    def create_histogram(self, name: str, description: str, labelnames: list = None,
                         buckets: tuple = None) -> Histogram:
        kwargs = {
            'name': name,
            'documentation': description,
            'labelnames': labelnames or [],
            'registry': self.registry
        }
        if buckets:
            kwargs['buckets'] = buckets
        return Histogram(**kwargs)

    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format"""
        return generate_latest(self.registry).decode('utf-8')


class StorageQueryMetrics:
    """Counters and timings for chain storage lookups made by the API services."""

    def __init__(self, registry: MetricsRegistry):
        self.storage_queries_total = registry.create_counter(
            'storage_queries_total',
            'Total chain storage lookups',
            ['module', 'storage_function']
        )
        self.storage_query_duration = registry.create_histogram(
            'storage_query_duration_seconds',
            'Chain storage lookup duration',
            ['module', 'storage_function'],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float('inf'))
        )
        self.pallet_missing_total = registry.create_counter(
            'pallet_missing_total',
            'Requests rejected because the runtime lacks a pallet',
            ['module']
        )

    def record_query(self, module: str, storage_function: str, duration: float):
        self.storage_queries_total.labels(module=module, storage_function=storage_function).inc()
        self.storage_query_duration.labels(module=module, storage_function=storage_function).observe(duration)

    def record_pallet_missing(self, module: str):
        self.pallet_missing_total.labels(module=module).inc()


def setup_metrics(service_name: str, version: str = "0.1.0") -> MetricsRegistry:
    """
    Setup metrics for a service following the same pattern as setup_enhanced_logger.

    Args:
        service_name: Name of the service (e.g., 'polkadot-assets-sidecar')
        version: Service version reported through service_info

    Returns:
        MetricsRegistry: Configured metrics registry for the service
    """
    with _metrics_lock:
        if service_name in _service_registries:
            logger.debug(f"Metrics already setup for {service_name}")
            return _service_registries[service_name]

        metrics_registry = MetricsRegistry(service_name, version)
        _service_registries[service_name] = metrics_registry

        logger.info(f"Metrics setup completed for service: {service_name}")
        return metrics_registry

