"""
Product Store — Product Service
================================

What:  The five product operations: list, get, create, replace, delete.
How:   Each method runs exactly one storage call on the request's StoreSession
       and translates driver outcomes into application exceptions.
Who:   Called by the products route handlers.

Error translation:
    DuplicateKeyError on insert        → DuplicateProductError  (400)
    no match on find/replace/delete    → ProductNotFoundError   (404)
    any other PyMongoError             → DatabaseError          (500)
    stored document of the wrong shape → DatabaseError          (500)

ProductService holds no state; the session is passed in per call.
"""

import logging
from typing import List

from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from productstore.database import ID_FIELD, StoreSession
from productstore.exceptions import (
    DatabaseError,
    DuplicateProductError,
    ProductNotFoundError,
)
from productstore.models.product import (
    PUBLIC_PROJECTION,
    from_document,
    new_product_id,
    to_document,
)
from productstore.schemas.product import Product

logger = logging.getLogger(__name__)


class ProductService:
    """
    Storage operations for the products collection.

    Every method takes the StoreSession injected for the current request and
    passes its client session to the driver, so a request never borrows
    another request's handle.
    """

    async def list_products(self, db: StoreSession) -> List[Product]:
        """Return every stored product. No pagination, no guaranteed order."""
        try:
            cursor = db.collection.find({}, PUBLIC_PROJECTION, session=db.session)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed get all products: %s", e)
            raise DatabaseError(context={"operation": "list", "error": str(e)})

        try:
            return [from_document(doc) for doc in documents]
        except ValidationError as e:
            logger.error("Stored product does not decode: %s", e)
            raise DatabaseError(context={"operation": "list", "error": str(e)})

    async def get_product(self, db: StoreSession, product_id: str) -> Product:
        """
        Fetch one product by exact id match.

        Raises:
            ProductNotFoundError: nothing matches, or the stored id is empty
            DatabaseError: the query failed, or the stored document is malformed
        """
        try:
            doc = await db.collection.find_one(
                {ID_FIELD: product_id}, PUBLIC_PROJECTION, session=db.session
            )
        except PyMongoError as e:
            logger.error("Failed find product: %s", e)
            raise DatabaseError(context={"operation": "get", "product_id": product_id, "error": str(e)})

        if doc is None:
            raise ProductNotFoundError(product_id=product_id)

        try:
            product = from_document(doc)
        except ValidationError as e:
            logger.error("Stored product %s does not decode: %s", product_id, e)
            raise DatabaseError(context={"operation": "get", "product_id": product_id, "error": str(e)})

        if not product.id:
            raise ProductNotFoundError(product_id=product_id)
        return product

    async def create_product(self, db: StoreSession, product: Product) -> Product:
        """
        Insert a product as a new document.

        A product without an id (or with an empty one) gets a generated one.
        Returns the product as stored, id included.
        """
        if not product.id:
            product = product.model_copy(update={"id": new_product_id()})

        try:
            await db.collection.insert_one(to_document(product), session=db.session)
        except DuplicateKeyError:
            logger.info("Rejected duplicate product id %s", product.id)
            raise DuplicateProductError(product_id=product.id)
        except PyMongoError as e:
            logger.error("Failed insert product: %s", e)
            raise DatabaseError(context={"operation": "create", "error": str(e)})

        logger.info("Created product %s", product.id)
        return product

    async def update_product(self, db: StoreSession, product_id: str, product: Product) -> None:
        """
        Replace the product matched by id with `product`, wholesale.

        The stored id stays `product_id` whatever the body says. Nothing is
        created when no document matches.
        """
        replacement = product.model_copy(update={"id": product_id})

        try:
            result = await db.collection.replace_one(
                {ID_FIELD: product_id}, to_document(replacement), session=db.session
            )
        except PyMongoError as e:
            logger.error("Failed update product: %s", e)
            raise DatabaseError(context={"operation": "update", "product_id": product_id, "error": str(e)})

        if result.matched_count == 0:
            raise ProductNotFoundError(product_id=product_id)
        logger.info("Replaced product %s", product_id)

    async def delete_product(self, db: StoreSession, product_id: str) -> None:
        """Remove the product matched by id."""
        try:
            result = await db.collection.delete_one({ID_FIELD: product_id}, session=db.session)
        except PyMongoError as e:
            logger.error("Failed delete product: %s", e)
            raise DatabaseError(context={"operation": "delete", "product_id": product_id, "error": str(e)})

        if result.deleted_count == 0:
            raise ProductNotFoundError(product_id=product_id)
        logger.info("Deleted product %s", product_id)


# ── Singleton Instance ────────────────────────────────────────────────────
product_service = ProductService()
