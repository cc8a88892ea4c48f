"""
Logging setup and per-request access logging
"""
import logging
import sys
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

REQUEST_ID_HEADER = "X-Request-ID"


def setup_logging(level: str = "INFO"):
    """Configure the root logger once for the whole process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # passlib logs a harmless traceback when probing newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration for every request.

    Reuses the caller's X-Request-ID when present, otherwise generates one,
    and echoes it back on the response.
    """

    def __init__(self, app, logger_name: str = "storefront.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            self.logger.exception(
                f"{request.method} {request.url.path} 500 {duration_ms}ms request_id={request_id}"
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        message = f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms request_id={request_id}"
        if response.status_code >= 500:
            self.logger.error(message)
        elif response.status_code >= 400:
            self.logger.warning(message)
        else:
            self.logger.info(message)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
