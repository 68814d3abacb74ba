"""HTTP middleware."""

from staking_ledger.api.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    resolve_request_id,
)

__all__ = ["REQUEST_ID_HEADER", "RequestContextMiddleware", "resolve_request_id"]
