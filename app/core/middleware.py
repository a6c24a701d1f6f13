import time
import uuid
from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request/response pair and tags responses with a request id."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        with logger.contextualize(request_id=request_id):
            logger.info(
                f"{request.method} {request.url.path} started (client={client_ip})"
            )

            try:
                response: Response = await call_next(request)
            except Exception as e:
                process_time = time.perf_counter() - start_time
                logger.error(
                    f"{request.method} {request.url.path} failed after "
                    f"{process_time:.4f}s: {e}"
                )
                raise

            process_time = time.perf_counter() - start_time
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {process_time:.4f}s"
            )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
