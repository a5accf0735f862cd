import contextvars
import logging
import re
import time
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Ids of the request being served and of the viewing session it acts for
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)
session_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("session_id", default=None)

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids are echoed into logs and headers, so keep them short and plain
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s session=%(session_id)s] %(name)s: %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp request_id and session_id on every record for the formatter."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        record.session_id = session_id_ctx.get() or "-"
        return True


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger once at startup.

    A single StreamHandler is added; when the root logger already has handlers
    (uvicorn --reload, pytest) nothing is changed.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    root.setLevel(level)
    root.addHandler(handler)


def resolve_request_id(incoming: Optional[str]) -> str:
    if incoming and _REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


@contextmanager
def session_context(session_id: Optional[str]) -> Iterator[None]:
    """Tag log records emitted inside the block with the viewing session."""
    token = session_id_ctx.set(session_id)
    try:
        yield
    finally:
        session_id_ctx.reset(token)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logger.

    Reuses a well-formed X-Request-ID from the caller or mints one, and returns
    it on the response. Server errors are logged at WARNING. The body is never read.
    """

    async def dispatch(self, request: Request, call_next):
        req_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_ctx.set(req_id)

        logger = logging.getLogger("muse.middleware")
        start = time.perf_counter()

        try:
            logger.info(
                "request.start %s %s",
                request.method,
                request.url.path,
                extra={"client": request.client.host if request.client else None},
            )

            response = await call_next(request)

            duration_ms = int((time.perf_counter() - start) * 1000)
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "request.end %s %s status=%s duration_ms=%d",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
            response.headers[REQUEST_ID_HEADER] = req_id
            return response

        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception("request.error %s %s duration_ms=%d", request.method, request.url.path, duration_ms)
            raise
        finally:
            request_id_ctx.reset(token)
