"""Shared fixtures for the client model generator tests."""

from collections.abc import Callable
from typing import Any

import pytest

from oas_model_generator.generator.languages import CSHARP, RUST, TargetLanguage
from oas_model_generator.parser.oas_parser import (
    JsonObjectType,
    Operation,
    Parameter,
    ParameterLocation,
    Response,
    SchemaNode,
)


@pytest.fixture
def csharp() -> TargetLanguage:
    return CSHARP


@pytest.fixture
def rust() -> TargetLanguage:
    return RUST


@pytest.fixture
def pet_schema() -> SchemaNode:
    """A named object schema shared by several operations."""
    return SchemaNode(
        type=JsonObjectType.OBJECT,
        type_name="Pet",
        properties={
            "id": SchemaNode(type=JsonObjectType.INTEGER, format="int64"),
            "name": SchemaNode(type=JsonObjectType.STRING),
        },
        required=["id"],
    )


@pytest.fixture
def make_parameter() -> Callable[..., Parameter]:
    def factory(
        name: str,
        location: ParameterLocation = ParameterLocation.QUERY,
        *,
        required: bool = False,
        schema: SchemaNode | None = None,
        **kwargs: Any,
    ) -> Parameter:
        if schema is None:
            schema = SchemaNode(type=JsonObjectType.STRING)
        return Parameter(name=name, location=location, required=required, schema=schema, **kwargs)

    return factory


@pytest.fixture
def make_operation() -> Callable[..., Operation]:
    def factory(
        operation_id: str | None = "listPets",
        *,
        method: str = "GET",
        path: str = "/pets",
        tags: list[str] | None = None,
        parameters: list[Parameter] | None = None,
        responses: dict[str, SchemaNode | None] | None = None,
        **kwargs: Any,
    ) -> Operation:
        """Build an operation; ``responses`` maps status codes to schemas."""
        if responses is None:
            responses = {"200": None}
        return Operation(
            method=method,
            path=path,
            operation_id=operation_id,
            tags=["pets"] if tags is None else tags,
            parameters=[] if parameters is None else parameters,
            responses={code: Response(status_code=code, schema=schema) for code, schema in responses.items()},
            **kwargs,
        )

    return factory
