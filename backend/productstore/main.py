"""
Product Store — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn productstore.main:app`) or the `productstore` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────────────────────────┐               │
    │  │ Request context (ID + access log)│               │
    │  └──────────────────────────────────┘               │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌─────────────────┐       │
    │  │ /products[/{id}]     │ │ GET /health     │       │
    │  └──────────────────────┘ └─────────────────┘       │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Body/Duplicate→400 │ NotFound→404 │ DB→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the MongoDB client and attach it to app.state
    3. Ensure the unique index on `id`; failure aborts startup

    Shutdown:
    1. Close the MongoDB client (all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from productstore import __version__
from productstore.config import Settings, settings as default_settings
from productstore.database import close_client, create_client, ensure_indexes
from productstore.exceptions import (
    DatabaseError,
    DuplicateProductError,
    InvalidBodyError,
    ProductNotFoundError,
    ProductStoreError,
    ResponseEncodingError,
)
from productstore.middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware
from productstore.routes import health, products
from productstore.schemas.product import JSON_MEDIA_TYPE

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before the database is touched.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the MongoDB client on startup and close it on shutdown.

    If the index cannot be ensured the exception propagates out of the
    lifespan; uvicorn then refuses to start serving.
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Product Store starting up...")

    client = create_client(config)
    try:
        await ensure_indexes(client, config)
    except Exception:
        logger.critical("Startup aborted: the product index could not be ensured.")
        await close_client(client)
        raise

    app.state.mongo_client = client
    logger.info("Using %s.%s", config.mongo_database, config.mongo_collection)
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Product Store shutting down...")
    await close_client(client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str) -> JSONResponse:
    """The one error body shape the API emits: {"message": "..."}."""
    return JSONResponse(
        status_code=status_code,
        content={"message": message},
        media_type=JSON_MEDIA_TYPE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and error bodies.

    Handler hierarchy:
        InvalidBodyError        → 400
        DuplicateProductError   → 400
        ProductNotFoundError    → 404
        DatabaseError           → 500
        ResponseEncodingError   → 500
        ProductStoreError       → its status_code
        Exception (fallback)    → 500

    Driver messages and other context are logged, never returned.
    """

    def request_id(request: Request) -> str:
        return getattr(request.state, "request_id", "")

    @app.exception_handler(InvalidBodyError)
    async def handle_invalid_body(request: Request, exc: InvalidBodyError):
        rid = request_id(request)
        logger.warning("[%s] Incorrect body on %s %s: %s", rid, request.method, request.url.path, exc.context)
        return error_response(400, exc.message)

    @app.exception_handler(DuplicateProductError)
    async def handle_duplicate(request: Request, exc: DuplicateProductError):
        return error_response(400, exc.message)

    @app.exception_handler(ProductNotFoundError)
    async def handle_not_found(request: Request, exc: ProductNotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(ResponseEncodingError)
    async def handle_encoding_error(request: Request, exc: ResponseEncodingError):
        rid = request_id(request)
        logger.error("[%s] Could not encode response: %s", rid, exc.context)
        return error_response(500, exc.message)

    @app.exception_handler(ProductStoreError)
    async def handle_app_error(request: Request, exc: ProductStoreError):
        rid = request_id(request)
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace logged server-side only."""
        rid = request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = error_response(500, "Internal server error")
        # Runs outside the middleware chain, so the ID header is set here
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings to run with; defaults to the module-level settings.
                Tests pass their own to point at a different database.
    """
    app = FastAPI(
        title="Product Store API",
        description="CRUD over a single MongoDB-backed products collection.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config or default_settings

    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(products.router)
    app.include_router(health.router)

    return app


# uvicorn expects `productstore.main:app` to be importable
app = create_app()


def run() -> None:
    """Entry point for the `productstore` console script."""
    uvicorn.run(
        "productstore.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
    )


if __name__ == "__main__":
    run()
