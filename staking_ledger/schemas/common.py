"""
Common schema types used across the API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every rejected ledger operation."""

    detail: str
    code: Optional[str] = None
    category: Optional[str] = None
    context: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
    program_id: str
