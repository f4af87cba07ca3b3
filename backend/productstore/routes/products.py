"""
Product Store — Products Route Handlers
========================================

What:  The five product endpoints.
How:   Each handler receives a request-scoped StoreSession, calls ProductService
       once, and writes the response. Errors surface as ProductStoreError
       subclasses and are rendered by the global handlers in main.py.
Who:   Mounted by create_app().

Route Table:
    GET    /products        → 200 JSON array
    POST   /products        → 201 Location header, empty body
    GET    /products/{id}   → 200 JSON object
    PUT    /products/{id}   → 204
    DELETE /products/{id}   → 204

Bodies are read raw and handed to decode_product, so a bad body is a 400
"Incorrect body" rather than FastAPI's 422.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from productstore.database import StoreSession, get_db_session
from productstore.schemas.product import (
    Product,
    ProductJSONResponse,
    decode_product,
)
from productstore.services.product_service import product_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(tags=["Products"])

_ERROR_RESPONSES = {
    500: {"description": "Database error"},
}


@router.get(
    "/products",
    response_class=ProductJSONResponse,
    responses={
        200: {"description": "Every stored product", "model": list[Product]},
        **_ERROR_RESPONSES,
    },
    summary="List all products",
)
async def list_products(db: StoreSession = Depends(get_db_session)) -> Response:
    products = await product_service.list_products(db)
    return ProductJSONResponse([product.model_dump() for product in products])


@router.post(
    "/products",
    status_code=201,
    responses={
        201: {"description": "Created; see the Location header"},
        400: {"description": "Incorrect body, or the id is already taken"},
        **_ERROR_RESPONSES,
    },
    summary="Create a product",
)
async def create_product(
    request: Request,
    db: StoreSession = Depends(get_db_session),
) -> Response:
    """
    Insert the request body as a new product.

    The Location header is the request path plus the stored id, e.g.
    POST /products → Location: /products/65f1c0ffee0ddba11cafe123
    """
    product = decode_product(await request.body())
    created = await product_service.create_product(db, product)

    return Response(
        status_code=201,
        headers={"Location": f"{request.url.path}/{created.id}"},
        media_type="application/json",
    )


@router.get(
    "/products/{id}",
    response_class=ProductJSONResponse,
    responses={
        200: {"description": "The product", "model": Product},
        404: {"description": "Product not found"},
        **_ERROR_RESPONSES,
    },
    summary="Get a product by id",
)
async def get_product(id: str, db: StoreSession = Depends(get_db_session)) -> Response:
    product = await product_service.get_product(db, id)
    return ProductJSONResponse(product.model_dump())


@router.put(
    "/products/{id}",
    status_code=204,
    responses={
        204: {"description": "Replaced"},
        400: {"description": "Incorrect body"},
        404: {"description": "Product not found"},
        **_ERROR_RESPONSES,
    },
    summary="Replace a product",
)
async def update_product(
    id: str,
    request: Request,
    db: StoreSession = Depends(get_db_session),
) -> Response:
    """Full replacement; fields missing from the body are stored empty."""
    product = decode_product(await request.body())
    await product_service.update_product(db, id, product)
    return Response(status_code=204)


@router.delete(
    "/products/{id}",
    status_code=204,
    responses={
        204: {"description": "Deleted"},
        404: {"description": "Product not found"},
        **_ERROR_RESPONSES,
    },
    summary="Delete a product",
)
async def delete_product(id: str, db: StoreSession = Depends(get_db_session)) -> Response:
    await product_service.delete_product(db, id)
    return Response(status_code=204)
