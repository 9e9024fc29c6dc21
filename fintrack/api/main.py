"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintrack.api.dependencies import get_request_id
from fintrack.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintrack.api.v1 import credit_cards, credit_card_expenses, recurring_expenses, transactions
from fintrack.domain.exceptions import DomainException
from fintrack.domain.validation import field_errors_from_pydantic
from fintrack.infrastructure.database.session import init_db
from fintrack.infrastructure.observability.logging import setup_logging
from fintrack.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def error_body(status: str, message: str, details=None) -> dict:
    return {"status": status, "message": message, "details": list(details or [])}


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    if exc.status_code >= 500:
        logging.error(f"Domain error: {exc.message}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status, exc.message, exc.details))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [str(error) for error in field_errors_from_pydantic(exc)]
    return JSONResponse(status_code=400, content=error_body("fail", "Validation failed", details))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content=error_body("error", "Internal server error"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_schema_on_startup:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Fintrack API",
        description="Credit card invoices, installments and recurring expenses",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Error envelopes: {status, message, details}
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(credit_cards.router, prefix="/v1", tags=["credit-cards"])
    app.include_router(credit_card_expenses.router, prefix="/v1", tags=["credit-card-expenses"])
    app.include_router(recurring_expenses.router, prefix="/v1", tags=["recurring-expenses"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])

    return app


app = create_app()
