"""
Product Store — Product Codec Unit Tests
=========================================

What:  Tests for request decoding, response encoding and document mapping.

Test Strategy:
    ✅ Valid bodies decode; missing or null fields default; unknown keys are ignored
    ✅ Malformed or wrongly typed bodies raise InvalidBodyError
    ✅ Encoding is indented UTF-8; unencodable payloads raise ResponseEncodingError
    ✅ Documents never leak Mongo's _id; a missing stored id reads as ""
"""

import pytest
from bson import ObjectId
from pydantic import ValidationError

from productstore.exceptions import InvalidBodyError, ResponseEncodingError
from productstore.models.product import from_document, new_product_id, to_document
from productstore.schemas.product import (
    JSON_MEDIA_TYPE,
    Product,
    ProductJSONResponse,
    decode_product,
    encode_json,
)


class TestDecodeProduct:

    def test_decode_full_body(self):
        product = decode_product(b'{"id": "sku-1", "name": "Widget", "price": "9.99"}')

        assert product == Product(id="sku-1", name="Widget", price="9.99")

    def test_decode_missing_fields_default(self):
        product = decode_product(b"{}")

        assert product.id is None
        assert product.name == ""
        assert product.price == ""

    def test_decode_price_stays_a_string(self):
        product = decode_product(b'{"price": "0035.000"}')

        assert product.price == "0035.000"

    def test_decode_null_fields_become_empty(self):
        product = decode_product(b'{"id": null, "name": null, "price": "1"}')

        assert product == Product(id=None, name="", price="1")

    def test_decode_ignores_unknown_keys(self):
        product = decode_product(b'{"name": "x", "category": {"id": "books"}}')

        assert product.model_dump() == {"id": None, "name": "x", "price": ""}

    @pytest.mark.parametrize(
        "raw",
        [b"", b"{", b"null", b'"text"', b"[]", b'{"price": 35.0}', b'{"name": ["a"]}'],
    )
    def test_decode_rejects(self, raw):
        with pytest.raises(InvalidBodyError) as exc_info:
            decode_product(raw)

        assert exc_info.value.message == "Incorrect body"
        assert exc_info.value.status_code == 400


class TestEncodeJson:

    def test_encode_is_indented(self):
        assert encode_json({"id": "1"}) == b'{\n  "id": "1"\n}'

    def test_encode_empty_list(self):
        assert encode_json([]) == b"[]"

    def test_encode_keeps_unicode(self):
        assert encode_json({"name": "Café"}) == '{\n  "name": "Café"\n}'.encode("utf-8")

    def test_encode_failure_is_local_error(self):
        with pytest.raises(ResponseEncodingError) as exc_info:
            encode_json({"id": ObjectId()})

        assert exc_info.value.status_code == 500

    def test_response_class(self):
        response = ProductJSONResponse([{"id": "1", "name": "", "price": ""}])

        assert response.media_type == JSON_MEDIA_TYPE
        assert response.headers["content-type"] == JSON_MEDIA_TYPE
        assert response.body.startswith(b"[\n  {")


class TestDocumentMapping:

    def test_to_document(self):
        doc = to_document(Product(id="sku-1", name="Widget", price="9.99"))

        assert doc == {"id": "sku-1", "name": "Widget", "price": "9.99"}

    def test_from_document_drops_mongo_id(self):
        product = from_document({"_id": ObjectId(), "id": "sku-1", "name": "Widget", "price": "9.99"})

        assert product.model_dump() == {"id": "sku-1", "name": "Widget", "price": "9.99"}

    def test_from_document_missing_fields(self):
        product = from_document({"id": "sku-1"})

        assert product.name == ""
        assert product.price == ""

    def test_from_document_without_id(self):
        product = from_document({"name": "x", "price": "1"})

        assert product.id == ""

    def test_from_document_rejects_non_string_field(self):
        with pytest.raises(ValidationError):
            from_document({"id": "sku-1", "price": 35})

    def test_new_product_id_is_unique_object_id(self):
        first, second = new_product_id(), new_product_id()

        assert ObjectId.is_valid(first)
        assert first != second
