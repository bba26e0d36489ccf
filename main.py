import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from clients.identity_provider import IdentityProviderClient
from clients.stripe_gateway import StripeGateway
from config import Settings
from database import build_engine, build_session_factory, check_connection, init_db
from middleware.auth_gate import AuthorizationGate, SessionResolver
from routers import (
    invoices_router,
    notifications_router,
    payment_methods_router,
    payments_router,
    webhooks_router,
)
from services.errors import PortalError
from services.webhook_processor import WebhookProcessor
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
    payment_gateway: Optional[StripeGateway] = None,
    identity_client: Optional[IdentityProviderClient] = None,
) -> FastAPI:
    """
    Build the API application.

    Shared clients are constructed here, once per process, and kept on
    ``app.state``; pass substitutes to override any of them.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    missing = settings.validate_required()
    if missing:
        logger.warning("Missing environment variables: %s", ", ".join(missing))

    if session_factory is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo)
        session_factory = build_session_factory(engine)
    else:
        engine = session_factory.kw["bind"]

    payment_gateway = payment_gateway or StripeGateway(settings.stripe_secret_key, settings.stripe_currency)
    identity_client = identity_client or IdentityProviderClient(settings.idp_url, settings.idp_anon_key)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.is_production and settings.database_url.startswith("sqlite"):
            init_db(engine)
        logger.info("LabPortal API started (%s)", settings.environment)
        yield
        identity_client.close()
        engine.dispose()

    # App instance
    app = FastAPI(title="LabPortal API", lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.payment_gateway = payment_gateway
    app.state.webhook_processor = WebhookProcessor(session_factory, settings.stripe_webhook_secret)

    # Session + tenant resolution for every non-exempt route
    gate = AuthorizationGate(
        SessionResolver(settings.idp_jwt_secret, identity_client, audience=settings.idp_jwt_audience),
        session_factory,
        secure_cookies=settings.is_production,
    )
    app.middleware("http")(gate)

    # Fallback for anything the routes did not handle
    @app.middleware("http")
    async def internal_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or [settings.app_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
            message = exc.message
        else:
            message = exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.get("/health", tags=["health"])
    def health():
        database_ok = check_connection(engine)
        return JSONResponse(
            status_code=200 if database_ok else 503,
            content={"status": "ok" if database_ok else "degraded", "database": database_ok},
        )

    app.include_router(invoices_router)
    app.include_router(payments_router)
    app.include_router(payment_methods_router)
    app.include_router(notifications_router)
    app.include_router(webhooks_router)

    return app


app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
