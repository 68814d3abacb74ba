"""
Per-request context for logs and the audit trail.

- Accepts a well-formed X-Request-ID from the client or mints one
- Publishes the request id and client User-Agent through context vars, so
  log records and EventLog rows written during the request carry them
- Echoes the id in the response and flags slow ledger mutations
"""

import re
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from staking_ledger.logging_config import get_logger, request_id_var, user_agent_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_USER_AGENT = 256
SLOW_MUTATION_MS = 500
SLOW_READ_MS = 1000

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")
_MUTATING_METHODS = frozenset(("POST", "PUT", "PATCH", "DELETE"))


def resolve_request_id(incoming: Optional[str]) -> str:
    """Client-supplied ids are kept only if they are safe to log and index."""
    if incoming and _REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request id and user agent for the lifetime of one request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        user_agent = request.headers.get("user-agent")

        request.state.request_id = request_id
        id_token = request_id_var.set(request_id)
        agent_token = user_agent_var.set(user_agent[:MAX_USER_AGENT] if user_agent else None)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            mutating = request.method in _MUTATING_METHODS
            if duration_ms > (SLOW_MUTATION_MS if mutating else SLOW_READ_MS):
                logger.warning(
                    "Slow ledger mutation" if mutating else "Slow request",
                    extra={
                        "path": request.url.path,
                        "method": request.method,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    },
                )
            elif mutating:
                logger.debug(
                    "Request completed",
                    extra={
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    },
                )
            return response
        finally:
            user_agent_var.reset(agent_token)
            request_id_var.reset(id_token)
