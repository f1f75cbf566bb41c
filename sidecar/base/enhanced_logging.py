"""
Enhanced logging infrastructure for the assets sidecar.

Correlation ids, structured error context and lifecycle events on top of loguru.
Every request handled by the API carries a correlation id so that the log lines
emitted by routers, services and the chain-state accessor can be tied together.
"""

import os
import sys
import time
import uuid
import contextvars
import traceback
from typing import Dict, Any, Optional
from loguru import logger
import psutil


# Correlation id of the request being handled, per asyncio task
_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return f"req_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID of the current context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: Optional[str]):
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


def get_system_state() -> Dict[str, Any]:
    """Get current process state for error context."""
    try:
        process = psutil.Process()
        return {
            "memory_usage_mb": round(process.memory_info().rss / 1024 / 1024, 2),
            "cpu_percent": process.cpu_percent(),
            "threads": process.num_threads(),
            "timestamp": time.time()
        }
    except Exception:
        return {"error": "unable_to_get_system_state"}


def setup_enhanced_logger(service_name: str, logs_dir: Optional[str] = None, level: str = "INFO"):
    """
    Setup loguru sinks with correlation ID support and structured context.

    Args:
        service_name: Name of the service (e.g., 'polkadot-assets-sidecar')
        logs_dir: Directory for the JSON log file, defaults to <project>/logs
        level: Minimum level for both sinks
    """
    def patch_record(record):
        record["extra"]["service"] = service_name
        record["extra"]["correlation_id"] = get_correlation_id() or "no_correlation"
        return True

    if logs_dir is None:
        project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        logs_dir = os.path.join(project_root, "logs")

    os.makedirs(logs_dir, exist_ok=True)

    logger.remove()

    # JSON file sink for log shipping
    logger.add(
        os.path.join(logs_dir, f"{service_name}.log"),
        rotation="500 MB",
        level=level,
        filter=patch_record,
        serialize=True,
    )

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | <cyan>{extra[service]}</cyan> | <blue>{extra[correlation_id]}</blue> | <white>{message}</white>",
        level=level,
        filter=patch_record,
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )


class ErrorContextManager:
    """
    Structured error logging for a service.

    Attaches the correlation id, process state and stack trace to every error
    so failures coming out of the node can be traced back to the request.
    """

    def __init__(self, service_name: str):
        self.service_name = service_name

    def log_error(self, message: str, error: Exception, **context):
        """
        Log an error with enhanced context.

        Args:
            message: Human-readable error message
            error: The exception that occurred
            **context: Additional context for the error
        """
        logger.bind(
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=get_correlation_id(),
            service=self.service_name,
            system_state=get_system_state(),
            stack_trace=traceback.format_exc(),
            **context
        ).error(message)

    def log_rejection(self, reason: str, **context):
        """Log a request rejected for a client-side reason (4xx)."""
        logger.bind(
            reason=reason,
            correlation_id=get_correlation_id(),
            service=self.service_name,
            **context
        ).warning(f"Request rejected: {reason}")

    def log_service_lifecycle(self, event: str, **context):
        """
        Log service lifecycle events.

        Args:
            event: The lifecycle event (start, stop, config_change, etc.)
            **context: Additional context for the event
        """
        logger.bind(
            lifecycle_event=event,
            correlation_id=get_correlation_id(),
            service=self.service_name,
            timestamp=time.time(),
            **context
        ).info(f"Service lifecycle: {event}")


def classify_error(error: Exception) -> str:
    """
    Classify errors into categories for metrics and alerting.

    Args:
        error: The exception to classify

    Returns:
        str: Error category
    """
    error_type = type(error).__name__.lower()
    error_message = str(error).lower()

    if 'connection' in error_type or 'timeout' in error_type or 'websocket' in error_message:
        return 'connection_error'
    elif 'validation' in error_type or error_type == 'valueerror':
        return 'validation_error'
    elif 'substrate' in error_type or 'rpc' in error_message or 'storage' in error_message:
        return 'substrate_error'
    elif 'permission' in error_message or 'auth' in error_message:
        return 'authorization_error'
    else:
        return 'unknown_error'


def log_service_start(service_name: str, **config):
    """Log service startup with configuration."""
    ErrorContextManager(service_name).log_service_lifecycle(
        "service_start",
        configuration=config,
        pid=os.getpid()
    )


def log_service_stop(service_name: str, **context):
    """Log service shutdown."""
    ErrorContextManager(service_name).log_service_lifecycle("service_stop", **context)
