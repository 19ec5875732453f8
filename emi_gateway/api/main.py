"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from emi_gateway.api import pages
from emi_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from emi_gateway.api.v1 import calculations, emi
from emi_gateway.api.v1.schemas import FieldErrorResponse
from emi_gateway.config import Settings, settings
from emi_gateway.domain.ports import CalculationRepository
from emi_gateway.domain.validation import ROOT_FIELD
from emi_gateway.infrastructure.factory import build_repository
from emi_gateway.infrastructure.observability.logging import setup_logging
from emi_gateway.services.calculation import CalculationService

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the same field_errors shape as loan validation"""
    field_errors = {}
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part not in ("body", "query")]
        field = location[0] if location else ROOT_FIELD
        field_errors.setdefault(field, []).append(error["msg"])

    return JSONResponse(
        status_code=422,
        content=FieldErrorResponse(field_errors=field_errors).model_dump(),
    )


def create_app(
    config: Optional[Settings] = None,
    repository: Optional[CalculationRepository] = None,
) -> FastAPI:
    """Create and configure FastAPI application; the store is fixed for the app's lifetime"""
    config = config or settings

    app = FastAPI(
        title="EMI Gateway",
        description="Loan EMI calculation and logging service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.calculation_service = CalculationService(
        repository if repository is not None else build_repository(config),
        currency_code=config.currency_code,
        currency_symbol=config.currency_symbol,
        version=config.calculation_version,
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": config.service_name,
            "persistence_backend": config.persistence_backend,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register routers
    app.include_router(calculations.router, prefix="/v1", tags=["calculations"])
    app.include_router(emi.router, prefix="/v1", tags=["emi"])
    app.include_router(pages.router, tags=["pages"])

    return app


app = create_app()
