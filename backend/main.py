"""
Ledger Backend API
Auth, chat, billing, voice, knowledge base and analytics over the JSON document store.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.helpers import error_body
from api.routes import (
    auth_router,
    billing_router,
    chat_router,
    dashboard_router,
    health_router,
    knowledge_router,
    voice_router,
)
from config import get_settings
from repositories import (
    ConflictError,
    MalformedSnapshotError,
    MissingRequiredFieldError,
    NotFoundError,
    StoreError,
)
from services.errors import AuthError, FeatureDisabledError, PaymentsError, ServiceError

logger = logging.getLogger(__name__)

_STORE_STATUS = (
    (NotFoundError, 404),
    (MissingRequiredFieldError, 422),
    (ConflictError, 409),
    (MalformedSnapshotError, 500),
)

_SERVICE_STATUS = (
    (AuthError, 401),
    (FeatureDisabledError, 403),
    (PaymentsError, 404),
)


def _status_for(exc: Exception, table, default: int) -> int:
    for exc_type, status in table:
        if isinstance(exc, exc_type):
            return status
    return default


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))

    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        status = _status_for(exc, _STORE_STATUS, 400)
        if status >= 500:
            logger.error("Store failure on %s: %s", request.url.path, exc.message)
        return JSONResponse(error_body(exc.message, exc.code), status_code=status)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        status = _status_for(exc, _SERVICE_STATUS, 400)
        return JSONResponse(error_body(exc.message, exc.code), status_code=status)

    for router in (
        health_router,
        auth_router,
        chat_router,
        billing_router,
        knowledge_router,
        voice_router,
        dashboard_router,
    ):
        app.include_router(router)
    return app


app = create_app()
