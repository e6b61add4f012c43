"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from avalanche_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from avalanche_planner.api.v1 import debts, profile, strategy, transfer
from avalanche_planner.infrastructure.database.session import init_db
from avalanche_planner.infrastructure.observability.logging import setup_logging
from avalanche_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Avalanche Planner",
        description="Debt repayment recommendations using the avalanche method",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Rejected values are not echoed back: NaN and Infinity have no JSON form
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(strategy.router, prefix="/v1", tags=["strategy"])
    app.include_router(transfer.router, prefix="/v1", tags=["data"])

    return app


app = create_app()
