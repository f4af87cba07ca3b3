"""
Product Store — Storage Gateway
================================

What:  MongoDB client lifecycle, index bootstrap, and the per-request session dependency.
How:   One AsyncMongoClient (connection pool) is created by the app lifespan and
       stored on `app.state`. Each request opens its own client session over the
       fixed database/collection and ends it when the request completes.
Who:   Used by route handlers via FastAPI's dependency injection system, and by
       the lifespan in main.py for startup/shutdown.

Connection Pooling:
    maxPoolSize bounds concurrent sockets shared by all in-flight requests.
    Sessions are lightweight handles over the pool; a session is never shared
    between two requests.
"""

import logging
from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Request
from pymongo import ASCENDING, AsyncMongoClient, ReadPreference
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.collection import AsyncCollection

from productstore.config import Settings

logger = logging.getLogger(__name__)

# Field every query, replacement and delete addresses; the unique index targets it too.
ID_FIELD = "id"
ID_INDEX_NAME = "id_unique"


@dataclass(frozen=True)
class StoreSession:
    """A request-scoped view of the products collection."""
    collection: AsyncCollection
    session: AsyncClientSession


# ── Client Lifecycle ──────────────────────────────────────────────────────
def create_client(settings: Settings) -> AsyncMongoClient:
    """
    Create the process-wide MongoDB client.

    The client does not open sockets until the first operation, so creating it
    never fails on an unreachable server; `ensure_indexes` is the first call
    that touches the network.
    """
    return AsyncMongoClient(
        settings.mongo_uri,
        maxPoolSize=settings.mongo_max_pool_size,
        read_preference=ReadPreference.PRIMARY,
    )


def get_collection(client: AsyncMongoClient, settings: Settings) -> AsyncCollection:
    """Resolve the configured products collection."""
    return client[settings.mongo_database][settings.mongo_collection]


async def ensure_indexes(client: AsyncMongoClient, settings: Settings) -> None:
    """
    Ensure the unique index on the product identifier exists.

    When:    Once during startup, before the app accepts traffic.
    Raises:  Whatever the driver raises. The lifespan lets it propagate so the
             server never starts without the uniqueness guarantee.

    Options:
        unique:     duplicate ids are rejected with DuplicateKeyError (E11000)
        sparse:     documents without an `id` field are not indexed
        background: build without blocking the collection (no-op on MongoDB 4.2+)
    """
    collection = get_collection(client, settings)
    try:
        await collection.create_index(
            [(ID_FIELD, ASCENDING)],
            name=ID_INDEX_NAME,
            unique=True,
            sparse=True,
            background=True,
        )
    except Exception:
        logger.critical(
            "Could not ensure index %s on %s.%s",
            ID_INDEX_NAME,
            settings.mongo_database,
            settings.mongo_collection,
            exc_info=True,
        )
        raise
    logger.info(
        "Index %s ensured on %s.%s",
        ID_INDEX_NAME,
        settings.mongo_database,
        settings.mongo_collection,
    )


async def close_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await client.close()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[StoreSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Reads the shared client and settings from app.state (set by the lifespan)
        2. Starts a client session on that pool
        3. Yields a StoreSession to the route handler
        4. Always: ends the session, whether the handler returned or raised

    Example usage in a route:
        @router.get("/products")
        async def list_products(db: StoreSession = Depends(get_db_session)):
            return await product_service.list_products(db)
    """
    client: AsyncMongoClient = request.app.state.mongo_client
    settings: Settings = request.app.state.settings

    async with client.start_session() as session:
        yield StoreSession(
            collection=get_collection(client, settings),
            session=session,
        )
