"""
Correlation ID middleware for the sidecar API.

Every request gets a correlation id, taken from the X-Correlation-ID header when
the caller sent one, so log lines from routers, services and the chain-state
accessor can be tied to the request that caused them.
"""

import time
from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from sidecar.base.enhanced_logging import generate_correlation_id, set_correlation_id

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()

        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)
        start_time = time.time()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.bind(
                path=request.url.path,
                query_params=dict(request.query_params),
                status=response.status_code,
                duration=time.time() - start_time
            ).info(f"{request.method} {request.url.path} {response.status_code}")
            return response

        except Exception as e:
            logger.bind(path=request.url.path).error(f"Unhandled error for {request.method} {request.url.path}: {e}")
            return Response(
                content=f"Internal server error: {str(e)}",
                status_code=500,
                headers={CORRELATION_HEADER: correlation_id}
            )

        finally:
            set_correlation_id(None)
