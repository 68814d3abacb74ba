"""
API v1 routes.
"""

from fastapi import APIRouter

from staking_ledger.api.v1 import accounts, auth, platform, projects, stakes
from staking_ledger.schemas.common import ErrorResponse

# Body of every rejected ledger operation
LEDGER_ERRORS = {
    code: {"model": ErrorResponse}
    for code in (400, 403, 404, 409)
}

router = APIRouter(responses=LEDGER_ERRORS)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(platform.router, prefix="/platform", tags=["Platform"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(stakes.router, prefix="/projects/{project_id}/stakes", tags=["Stakes"])
router.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
