"""FastAPI main application."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings
from exceptions import (
    BillingItemNotFoundError,
    ConfigurationError,
    ContainerNotFoundError,
    DatabaseError,
    DemurrageBillingException,
    InvoicingPreconditionError,
    LedgerError,
    TariffNotFoundError,
    TariffValidationError,
    ValidationError,
)
from logging_config import get_logger, setup_logging
from models import init_db
from api.middleware import setup_middleware
from api.routes import containers, demurrage, health, tariffs

setup_logging()
logger = get_logger(__name__)

settings = get_settings()

# Domain exception -> HTTP status; first match wins
EXCEPTION_STATUS_CODES = (
    (BillingItemNotFoundError, 404),
    (ContainerNotFoundError, 404),
    (TariffNotFoundError, 404),
    (InvoicingPreconditionError, 409),
    (TariffValidationError, 422),
    (ValidationError, 422),
    (LedgerError, 502),
    (DatabaseError, 503),
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info("Starting demurrage billing API")

    errors = settings.validate_required_settings()
    for error in errors:
        logger.warning(f"Configuration problem: {error}")
    if errors and settings.is_production:
        raise ConfigurationError("; ".join(errors))

    init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down demurrage billing API")


app = FastAPI(
    title="Demurrage & Detention Billing",
    description="Tiered demurrage and detention liability for forwarded containers",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_middleware(app)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(DemurrageBillingException)
async def billing_exception_handler(request: Request, exc: DemurrageBillingException):
    """Map domain exceptions to HTTP responses."""
    status_code = next(
        (code for exc_type, code in EXCEPTION_STATUS_CODES if isinstance(exc, exc_type)),
        400,
    )
    logger.warning(
        "Business logic error",
        error=str(exc),
        error_type=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(health.router, tags=["Health"])
app.include_router(demurrage.router, prefix="/api", tags=["Demurrage"])
app.include_router(tariffs.router, prefix="/api", tags=["Tariffs"])
app.include_router(containers.router, prefix="/api", tags=["Containers"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Demurrage & Detention Billing",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
