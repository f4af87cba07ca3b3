"""
Product Store — Product Schema and Wire Codec
==============================================

What:  The Product wire model plus the JSON decode/encode helpers used by the API.
How:   Pydantic parses request bodies straight from bytes; responses are rendered
       with the standard json module as 2-space indented UTF-8 text.
Who:   Used by the products routes (decode) and ProductJSONResponse (encode).

Wire format:
    {
      "id": "65f1c0ffee...",
      "name": "Go in Action",
      "price": "35.00"
    }

    `price` is a string; it is never parsed as a number.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from starlette.responses import JSONResponse

from productstore.exceptions import InvalidBodyError, ResponseEncodingError

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


class Product(BaseModel):
    """
    A product as sent and received over HTTP.

    Missing or null string fields default to "" the way an empty JSON object
    would decode; `id` stays None until the service assigns one.
    """
    id: Optional[str] = Field(default=None, description="Unique product identifier")
    name: str = Field(default="", description="Free-text product name")
    price: str = Field(default="", description="Price as entered; not parsed")

    model_config = {"extra": "ignore"}

    @field_validator("name", "price", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """A JSON null leaves the field at its zero value."""
        return "" if v is None else v


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ── Codec ─────────────────────────────────────────────────────────────────

def decode_product(raw: bytes) -> Product:
    """
    Parse a request body into a Product.

    Raises:
        InvalidBodyError: malformed JSON, a non-object payload, or a field of
        the wrong type (e.g. a numeric price).
    """
    try:
        return Product.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidBodyError(context={"errors": e.error_count()}) from e


def encode_json(payload: Any) -> bytes:
    """
    Serialize a product dict (or list of them) to indented JSON.

    Raises:
        ResponseEncodingError: the payload holds something json cannot represent.
    """
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ResponseEncodingError(context={"error": str(e)}) from e


class ProductJSONResponse(JSONResponse):
    """JSONResponse that renders through encode_json with an explicit charset."""

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        return encode_json(content)
