"""
Token issuance.
"""

from fastapi import APIRouter, HTTPException, status

from staking_ledger.api.deps import AppSettings, LedgerClock
from staking_ledger.kernel.identity import SignatureRejected, create_access_token, verify_login
from staking_ledger.logging_config import get_logger
from staking_ledger.schemas.auth import TokenRequest, TokenResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/token", response_model=TokenResponse)
async def issue_token(
    data: TokenRequest,
    clock: LedgerClock,
    settings: AppSettings,
):
    """
    Exchange a signed login for a bearer token.

    The signature must be an ed25519 signature by ``identity`` over
    ``staking-ledger-login:<identity>:<issued_at>``.
    """
    try:
        identity = verify_login(
            data.identity,
            data.issued_at,
            data.signature,
            now=clock.now(),
            max_skew=settings.login_max_skew_seconds,
        )
    except SignatureRejected as e:
        logger.warning("Login rejected", extra={"identity": data.identity, "reason": str(e)})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    token, expires_at, _ = create_access_token(identity)
    return TokenResponse(access_token=token, expires_at=expires_at, identity=identity)
