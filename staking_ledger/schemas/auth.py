"""
Token issuance schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TokenRequest(BaseModel):
    """Signed login: ed25519 signature over the login message for issued_at."""

    identity: str = Field(..., min_length=64, max_length=64)
    issued_at: int
    signature: str = Field(..., min_length=128, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    identity: str
