"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from installment_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from installment_ledger.api.v1 import installments, monthly, plans
from installment_ledger.infrastructure.observability.logging import setup_logging
from installment_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Installment Ledger",
        description="Monthly ledger views and installment plan tracking",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(monthly.router, prefix="/v1", tags=["monthly"])
    app.include_router(plans.router, prefix="/v1", tags=["plans"])
    app.include_router(installments.router, prefix="/v1", tags=["installments"])

    return app


app = create_app()
