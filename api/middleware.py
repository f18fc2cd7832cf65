"""FastAPI middleware for request logging."""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from logging_config import get_logger, bind_context, clear_context

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every API request and its outcome.

    Adds a request ID to all logs and to the response headers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        logger.info(
            "Request started",
            query=str(request.query_params) if request.query_params else None,
        )

        start_time = time.time()

        try:
            response = await call_next(request)

            duration_ms = (time.time() - start_time) * 1000
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round(duration_ms, 2),
                exc_info=True,
            )

            raise

        finally:
            clear_context()


def setup_middleware(app) -> None:
    """
    Add middleware to the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(RequestLoggingMiddleware)
    logger.info("Middleware configured")
