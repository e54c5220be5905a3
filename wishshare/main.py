"""
FastAPI application entry point.
Mounts routes and Prometheus metrics, configures logging, and maps service
errors to HTTP status codes: the only place where that mapping happens.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sqlalchemy.exc import SQLAlchemyError

from wishshare.api.v1.router import api_router
from wishshare.config import get_settings
from wishshare.core.errors import ErrorKind, HTTP_STATUS_BY_KIND, ServiceError
from wishshare.core.logging import configure_logging
from wishshare.core.metrics import POLICY_DENIALS

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.secret_key == "change-me-in-production":
        logger.warning("SECRET_KEY not set - tokens are signed with the default key")
    logger.info("%s starting up", settings.app_name)
    yield


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    POLICY_DENIALS.labels(exc.reason.value).inc()
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.reason.value},
        headers=headers,
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND[ErrorKind.INTERNAL],
        content={"detail": "Internal error", "code": ErrorKind.INTERNAL.value},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Share wishlists; reserve, purchase and comment on friends' wishes.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
