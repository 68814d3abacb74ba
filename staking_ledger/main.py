"""
Staking Ledger

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from staking_ledger.api.middleware import RequestContextMiddleware
from staking_ledger.api.v1 import router as api_v1_router
from staking_ledger.config import get_settings
from staking_ledger.database import close_db, init_db
from staking_ledger.kernel.errors import ErrorCategory, StakingError
from staking_ledger.logging_config import configure_logging, get_logger
from staking_ledger.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.POLICY: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCategory.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorCategory.TEMPORAL: status.HTTP_409_CONFLICT,
    ErrorCategory.STATE: status.HTTP_409_CONFLICT,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.ASSET_MOVER: status.HTTP_400_BAD_REQUEST,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized", extra={"program_id": settings.program_id})

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Multi-tenant staking ledger.

    - **Platform**: authority set allowed to register projects
    - **Projects**: per-project asset, fee rates and allowed lockup durations
    - **Stakes**: lock, unstake after lockup, or emergency-unstake before it
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(RequestContextMiddleware)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


@app.exception_handler(StakingError)
async def staking_error_handler(request: Request, exc: StakingError):
    """Typed ledger rejections: status follows the error category."""
    logger.warning(
        "Operation rejected",
        extra={
            "code": exc.code,
            "category": exc.category.value,
            "path": request.url.path,
            "method": request.method,
        },
    )
    headers = {}
    req_id = _request_id(request)
    if req_id:
        headers["X-Request-ID"] = req_id
    return JSONResponse(
        status_code=CATEGORY_STATUS[exc.category],
        content=exc.to_dict(),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    content = {"detail": "Validation error", "errors": errors}
    req_id = _request_id(request)
    if req_id:
        content["request_id"] = req_id
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=content,
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = _request_id(request)
    if settings.debug:
        content = {
            "detail": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected",
        program_id=settings.program_id,
    )


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "staking_ledger.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
