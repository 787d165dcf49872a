"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (logging, document store,
subscription registry). Middleware, CORS, error mapping and routers are
all registered here; each concern lives in its own module.

Tests pass a store into create_app(); production builds one from
settings at startup.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from microred import __version__
from microred.api import api_router
from microred.config import settings
from microred.errors import NotFoundError, StoreFailure
from microred.logging_config import configure_logging
from microred.realtime.registry import SubscriptionRegistry
from microred.store import DocumentStore, build_store

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. The store is only built (and later closed) here when
    create_app() wasn't handed one.
    """
    configure_logging(settings.log_level, settings.log_format)
    logger.info(
        "microred.starting",
        version=__version__,
        environment=settings.environment,
        store_backend=settings.store_backend,
        port=settings.port,
    )

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = build_store(settings)
        app.state.registry = SubscriptionRegistry(app.state.store)

    yield

    logger.info("microred.shutdown", subscriptions=len(app.state.registry))
    if owns_store:
        await app.state.store.close()


def _register_error_handlers(app: FastAPI) -> None:
    """NotFoundError → 404; StoreFailure and unserializable documents → 500.

    All three answer with an {"error", "detail"} body.
    """

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StoreFailure)
    async def store_failure_handler(request: Request, exc: StoreFailure):
        logger.error(
            "http.store_failure",
            path=request.url.path,
            operation=exc.operation,
            reason=exc.reason,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": f"Store operation '{exc.operation}' failed",
                "detail": exc.reason,
            },
        )

    @app.exception_handler(ResponseValidationError)
    async def response_validation_handler(request: Request, exc: ResponseValidationError):
        logger.error(
            "http.response_invalid",
            path=request.url.path,
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Stored document could not be serialized",
                "detail": "; ".join(
                    f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}"
                    for e in exc.errors()
                ),
            },
        )


def create_app(store: DocumentStore | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Microred API",
        description="Collaborators, microentrepreneurs, referrals, incentives, zones and routes",
        version=__version__,
        debug=settings.debug,
        docs_url="/api-docs",
        lifespan=lifespan,
    )

    if store is not None:
        app.state.store = store
        app.state.registry = SubscriptionRegistry(store)

    # ── Middleware stack ──────────────────────────────────────
    # Request flow: RequestId → CORS → handler

    from microred.middleware.request_id import RequestIdMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    _register_error_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    # Mount WebSocket route (real-time collection/document updates)
    from microred.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: microred.main:app)
app = create_app()
