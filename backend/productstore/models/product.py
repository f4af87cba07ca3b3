"""
Product Store — Product Document Mapping
=========================================

What:  Conversion between the Product schema and the document stored in MongoDB.
Who:   Used by ProductService for every read and write.

Document shape:
    {"_id": ObjectId(...), "id": "<str>", "name": "<str>", "price": "<str>"}

    `_id` belongs to MongoDB and never leaves the storage layer; reads project
    it away and `from_document` drops it if present.
"""

from typing import Any, Dict, Mapping

from bson import ObjectId

from productstore.schemas.product import Product

# Projection applied to every read
PUBLIC_PROJECTION = {"_id": False}


def new_product_id() -> str:
    """Generate an identifier for a product created without one."""
    return str(ObjectId())


def to_document(product: Product) -> Dict[str, Any]:
    """Build the stored document for a product. The product must carry an id."""
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
    }


def from_document(doc: Mapping[str, Any]) -> Product:
    """
    Build a Product from a stored document, ignoring storage-only fields.

    A document without an `id` maps to "". Raises pydantic.ValidationError
    when a stored field is not a string.
    """
    return Product(
        id=doc.get("id") or "",
        name=doc.get("name", ""),
        price=doc.get("price", ""),
    )
