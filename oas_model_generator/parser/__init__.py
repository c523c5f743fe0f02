"""
OpenAPI Parser Module for Client Model Generation

This module reads OpenAPI specifications into the operation and schema
object graph that the resolution engine consumes.
"""

from .oas_parser import (
    CollectionFormat,
    JsonObjectType,
    OASParser,
    Operation,
    Parameter,
    ParameterLocation,
    ParsedSpec,
    Response,
    SchemaNode,
)

__all__ = [
    "CollectionFormat",
    "JsonObjectType",
    "OASParser",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "ParsedSpec",
    "Response",
    "SchemaNode",
]
