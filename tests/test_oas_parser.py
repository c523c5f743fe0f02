"""Tests for reading OpenAPI documents into the operation and schema graph."""

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from oas_model_generator.parser.oas_parser import (
    CollectionFormat,
    JsonObjectType,
    OASParser,
    ParameterLocation,
    ParsedSpec,
)

SWAGGER_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Petstore", "version": "1.0"},
    "paths": {
        "/pets/{petId}": {
            "parameters": [{"name": "petId", "in": "path", "type": "integer", "format": "int64"}],
            "get": {
                "operationId": "getPet",
                "tags": ["pets"],
                "parameters": [
                    {
                        "name": "tags",
                        "in": "query",
                        "type": "array",
                        "items": {"type": "string"},
                        "collectionFormat": "multi",
                    },
                ],
                "responses": {
                    "200": {"description": "ok", "schema": {"$ref": "#/definitions/Pet"}},
                    "404": {"description": "missing"},
                },
            },
        },
        "/pets/{petId}/photo": {
            "post": {
                "operationId": "uploadPhoto",
                "consumes": ["multipart/form-data"],
                "parameters": [
                    {"name": "petId", "in": "path", "required": True, "type": "integer"},
                    {"name": "file", "in": "formData", "type": "file", "required": True},
                ],
                "responses": {"204": {"description": "stored"}},
            },
        },
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "required": ["id"],
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "owner": {"$ref": "#/definitions/Owner"},
                "friends": {"type": "array", "items": {"$ref": "#/definitions/Pet"}},
            },
        },
        "Owner": {"type": "object", "properties": {"name": {"type": "string"}}},
    },
}

OPENAPI_SPEC: dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Store"},
    "paths": {
        "/orders": {
            "post": {
                "operationId": "createOrder",
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Order"}}},
                },
                "responses": {
                    "201": {
                        "description": "created",
                        "content": {
                            "application/json": {
                                "schema": {"type": "object", "properties": {"id": {"type": "string"}}},
                            },
                        },
                    },
                },
            },
        },
        "/documents": {
            "put": {
                "operationId": "uploadDocument",
                "requestBody": {
                    "content": {
                        "multipart/form-data": {
                            "schema": {
                                "type": "object",
                                "required": ["content"],
                                "properties": {
                                    "content": {"type": "string", "format": "binary"},
                                    "title": {"type": "string"},
                                },
                            },
                        },
                    },
                },
                "responses": {"200": {"description": "ok"}},
            },
        },
    },
    "components": {
        "schemas": {
            "Order": {
                "type": "object",
                "properties": {
                    "note": {"type": ["string", "null"]},
                    "customer": {"oneOf": [{"$ref": "#/components/schemas/Customer"}, {"type": "null"}]},
                    "payment": {"oneOf": [{"type": "string"}, {"type": "integer"}]},
                },
            },
            "Customer": {"type": "object", "properties": {"email": {"type": "string"}}},
            "PremiumOrder": {
                "allOf": [{"$ref": "#/components/schemas/Order"}, {"properties": {"tier": {"type": "string"}}}],
            },
        },
    },
}


@pytest.fixture
def swagger_spec() -> ParsedSpec:
    return OASParser().parse_dict(copy.deepcopy(SWAGGER_SPEC))


@pytest.fixture
def openapi_spec() -> ParsedSpec:
    return OASParser().parse_dict(copy.deepcopy(OPENAPI_SPEC))


class TestSwaggerParsing:
    def test_operations_and_keys(self, swagger_spec: ParsedSpec) -> None:
        keys = [operation.key for operation in swagger_spec.operations]
        assert keys == ["GET /pets/{petId}", "POST /pets/{petId}/photo"]
        assert swagger_spec.title == "Petstore"

    def test_path_level_parameters_are_merged(self, swagger_spec: ParsedSpec) -> None:
        get_pet = swagger_spec.operations[0]
        assert get_pet.parameters is not None
        pet_id, tags = get_pet.parameters

        assert pet_id.location is ParameterLocation.PATH
        assert pet_id.required
        assert pet_id.schema is not None
        assert pet_id.schema.format == "int64"
        assert tags.collection_format is CollectionFormat.MULTI
        assert tags.schema is not None
        assert tags.schema.is_array

    def test_refs_share_one_node(self, swagger_spec: ParsedSpec) -> None:
        pet = swagger_spec.schemas["Pet"]
        get_pet = swagger_spec.operations[0]
        assert get_pet.responses is not None
        assert get_pet.responses["200"].schema is pet
        assert pet.properties["owner"] is swagger_spec.schemas["Owner"]
        assert pet.properties["friends"].items is pet

    def test_response_without_schema(self, swagger_spec: ParsedSpec) -> None:
        get_pet = swagger_spec.operations[0]
        assert get_pet.responses is not None
        assert get_pet.responses["404"].schema is None
        assert get_pet.responses["404"].description == "missing"

    def test_file_form_parameter(self, swagger_spec: ParsedSpec) -> None:
        upload = swagger_spec.operations[1]
        assert upload.parameters is not None
        file_parameter = upload.parameters[1]
        assert file_parameter.location is ParameterLocation.FORM_DATA
        assert file_parameter.schema is not None
        assert file_parameter.schema.is_file

    def test_input_is_not_mutated(self) -> None:
        spec = copy.deepcopy(OPENAPI_SPEC)
        OASParser().parse_dict(spec)
        assert spec == OPENAPI_SPEC


class TestOpenApiParsing:
    def test_json_body_becomes_body_parameter(self, openapi_spec: ParsedSpec) -> None:
        create_order = openapi_spec.operations[0]
        assert create_order.parameters is not None
        (body,) = create_order.parameters
        assert body.name == "body"
        assert body.location is ParameterLocation.BODY
        assert body.required
        assert body.schema is openapi_spec.schemas["Order"]

    def test_multipart_body_expands_to_form_parameters(self, openapi_spec: ParsedSpec) -> None:
        upload = openapi_spec.operations[1]
        assert upload.parameters is not None
        content, title = upload.parameters

        assert (content.name, content.required) == ("content", True)
        assert content.location is ParameterLocation.FORM_DATA
        assert content.schema is not None
        assert content.schema.type == JsonObjectType.FILE
        assert (title.name, title.required) == ("title", False)

    def test_type_lists_and_nullable_unions(self, openapi_spec: ParsedSpec) -> None:
        order = openapi_spec.schemas["Order"]
        assert order.properties["note"].is_nullable

        customer = order.properties["customer"]
        assert customer.is_nullable
        assert customer.actual_schema is openapi_spec.schemas["Customer"]

        assert order.properties["payment"].type == JsonObjectType.OBJECT

    def test_all_of_merges_properties(self, openapi_spec: ParsedSpec) -> None:
        premium = openapi_spec.schemas["PremiumOrder"]
        assert set(premium.properties) == {"note", "customer", "payment", "tier"}

    def test_inline_success_object_is_promoted(self, openapi_spec: ParsedSpec) -> None:
        create_order = openapi_spec.operations[0]
        assert create_order.responses is not None
        schema = create_order.responses["201"].schema
        assert schema is not None
        assert schema.type_name == "CreateOrderResponse"
        assert openapi_spec.schemas["CreateOrderResponse"] is schema


class TestMalformedInput:
    def test_malformed_parameters_and_responses_pass_through(self) -> None:
        spec = {
            "openapi": "3.0.0",
            "paths": {"/broken": {"get": {"operationId": "broken", "parameters": "nope", "responses": []}}},
        }
        (operation,) = OASParser().parse_dict(spec).operations
        assert operation.parameters is None
        assert operation.responses is None

    def test_empty_document_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="No specification data loaded"):
            OASParser().parse_dict({})

    def test_parse_file(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "spec.json"
        spec_file.write_text(json.dumps(SWAGGER_SPEC), encoding="utf-8")
        assert len(OASParser().parse_file(spec_file).operations) == 2
