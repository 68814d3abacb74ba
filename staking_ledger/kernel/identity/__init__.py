"""
Identity Core - caller identities and bearer tokens.
"""

from staking_ledger.kernel.identity.keys import IDENTITY_LEN, identity_bytes, parse_identity
from staking_ledger.kernel.identity.jwt import (
    AccessTokenPayload,
    JWTManager,
    create_access_token,
    verify_access_token,
)
from staking_ledger.kernel.identity.signature import (
    SignatureRejected,
    login_message,
    verify_login,
)

__all__ = [
    "IDENTITY_LEN",
    "identity_bytes",
    "parse_identity",
    "AccessTokenPayload",
    "JWTManager",
    "create_access_token",
    "verify_access_token",
    "SignatureRejected",
    "login_message",
    "verify_login",
]
