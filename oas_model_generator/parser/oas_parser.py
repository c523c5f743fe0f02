"""
OpenAPI Specification Parser for client model generation.

This module reads Swagger 2.0 and OpenAPI 3.x documents into the read-only
operation and schema object graph consumed by the resolution engine.
Named schemas are shared: every ``$ref`` to the same definition yields the
same ``SchemaNode`` instance.
"""

import enum
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from oas_model_generator.utils.string_case import normalize_identifier, pascalcase

logger = logging.getLogger(__name__)

# HTTP methods supported by OpenAPI
_HTTP_METHODS: Final = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Content types whose request bodies expand into one parameter per property
_FORM_CONTENT_TYPES: Final = ("multipart/form-data", "application/x-www-form-urlencoded")

# Preferred content types when a response or body declares several
_PREFERRED_CONTENT_TYPES: Final = ("application/json", "text/json", "application/octet-stream")


class JsonObjectType(enum.Flag):
    """Primitive type tags of a schema node, combinable as flags."""

    NONE = 0
    STRING = enum.auto()
    NUMBER = enum.auto()
    INTEGER = enum.auto()
    BOOLEAN = enum.auto()
    OBJECT = enum.auto()
    ARRAY = enum.auto()
    FILE = enum.auto()
    NULL = enum.auto()


_TYPE_FLAGS: Final = {
    "string": JsonObjectType.STRING,
    "number": JsonObjectType.NUMBER,
    "integer": JsonObjectType.INTEGER,
    "boolean": JsonObjectType.BOOLEAN,
    "object": JsonObjectType.OBJECT,
    "array": JsonObjectType.ARRAY,
    "file": JsonObjectType.FILE,
    "null": JsonObjectType.NULL,
}


class ParameterLocation(str, enum.Enum):
    """Where a parameter is sent."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"
    FORM_DATA = "formData"


class CollectionFormat(str, enum.Enum):
    """Serialization of array-valued parameters."""

    CSV = "csv"
    SSV = "ssv"
    TSV = "tsv"
    PIPES = "pipes"
    MULTI = "multi"


@dataclass(eq=False)
class SchemaNode:
    """Canonical description of a data shape.

    Nodes compare by identity: named nodes are shared and may be cyclic.
    A node with ``reference`` set is a thin pointer to another node that
    only adds its own nullability.
    """

    type: JsonObjectType = JsonObjectType.NONE
    format: str | None = None
    items: "SchemaNode | None" = None
    additional_properties: "SchemaNode | bool | None" = None
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    enum_values: list[Any] = field(default_factory=list)
    type_name: str | None = None
    nullable: bool = False
    description: str | None = None
    default: Any = None
    reference: "SchemaNode | None" = None

    @property
    def actual_schema(self) -> "SchemaNode":
        """Follow references to the node that carries the shape."""
        node = self
        seen: set[int] = set()
        while node.reference is not None and id(node) not in seen:
            seen.add(id(node))
            node = node.reference
        return node

    @property
    def is_named(self) -> bool:
        return self.type_name is not None

    @property
    def is_type_definition(self) -> bool:
        """Named object or enum shape that gets a generated type of its own.

        Named arrays, maps, files and primitives are inlined where they are used.
        """
        if not self.is_named:
            return False
        if self.is_enum:
            return True
        if self.is_array or self.is_file or self.is_dictionary:
            return False
        return bool(self.properties) or self.type & ~JsonObjectType.NULL == JsonObjectType.OBJECT

    @property
    def is_array(self) -> bool:
        return JsonObjectType.ARRAY in self.type

    @property
    def is_file(self) -> bool:
        return JsonObjectType.FILE in self.type

    @property
    def is_dictionary(self) -> bool:
        """Map shape: additional properties present and no fixed property set."""
        if self.properties or self.additional_properties in (None, False):
            return False
        return self.type in (JsonObjectType.NONE, JsonObjectType.OBJECT) or self.type == (
            JsonObjectType.OBJECT | JsonObjectType.NULL
        )

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_values)

    @property
    def is_nullable(self) -> bool:
        return self.nullable or JsonObjectType.NULL in self.type

    @property
    def is_empty(self) -> bool:
        """True for a schema that describes nothing (``{}``)."""
        actual = self.actual_schema
        return (
            not actual.is_type_definition
            and actual.type in (JsonObjectType.NONE, JsonObjectType.OBJECT)
            and not actual.properties
            and actual.items is None
            and actual.additional_properties in (None, False)
            and not actual.enum_values
        )


@dataclass
class Parameter:
    """Represents an OpenAPI parameter."""

    name: str
    location: ParameterLocation
    required: bool
    schema: SchemaNode | None
    collection_format: CollectionFormat | None = None
    deprecated: bool = False
    default: Any = None
    description: str | None = None


@dataclass
class Response:
    """Represents an OpenAPI response."""

    status_code: str
    schema: SchemaNode | None
    nullable: bool = False
    description: str = ""
    content_types: list[str] = field(default_factory=list)


@dataclass
class Operation:
    """Represents an OpenAPI operation."""

    method: str
    path: str
    operation_id: str | None
    tags: list[str]
    parameters: list[Parameter] | None
    responses: dict[str, Response] | None
    summary: str | None = None
    description: str | None = None
    deprecated: bool = False

    @property
    def key(self) -> str:
        """Identity of the operation across naming and failure reports."""
        return f"{self.method.upper()} {self.path}"


@dataclass
class ParsedSpec:
    """Represents a parsed OpenAPI specification."""

    info: dict[str, Any]
    operations: list[Operation]
    schemas: dict[str, SchemaNode]

    @property
    def title(self) -> str:
        return str(self.info.get("title", "API"))


def _extract_ref_name(ref_string: str) -> str:
    """Extract the reference name from an OpenAPI $ref string.

    Args:
        ref_string: The $ref value (e.g., "#/components/schemas/Model").

    Returns:
        The extracted reference name (e.g., "Model").
    """
    return ref_string.split("/")[-1]


def _type_flags(type_value: Any, schema_format: str | None) -> JsonObjectType:
    """Combine the ``type`` keyword (string or list) into flags.

    Unknown type names contribute nothing; a binary string is a file.
    """
    names = type_value if isinstance(type_value, list) else [type_value] if type_value else []
    flags = JsonObjectType.NONE
    for name in names:
        flags |= _TYPE_FLAGS.get(str(name), JsonObjectType.NONE)

    if JsonObjectType.STRING in flags and schema_format == "binary":
        flags = (flags & ~JsonObjectType.STRING) | JsonObjectType.FILE
    return flags


def _parameter_location(value: Any) -> ParameterLocation:
    """Map the ``in`` keyword, treating unknown locations as query parameters."""
    try:
        return ParameterLocation(value or "query")
    except ValueError:
        logger.info("Unknown parameter location '%s'; treating it as a query parameter", value)
        return ParameterLocation.QUERY


def _collection_format(value: Any) -> CollectionFormat | None:
    try:
        return CollectionFormat(value) if value else None
    except ValueError:
        logger.info("Unknown collection format '%s' ignored", value)
        return None


def _select_content(content: dict[str, Any]) -> tuple[str, dict[str, Any]] | None:
    """Pick the media type used to describe a body."""
    if not content:
        return None
    for content_type in _PREFERRED_CONTENT_TYPES:
        if content_type in content:
            return content_type, content[content_type]
    first = next(iter(content))
    return first, content[first]


class OASParser:
    """Parser for Swagger 2.0 and OpenAPI 3.x specifications."""

    def __init__(self) -> None:
        self.spec_data: dict[str, Any] | None = None
        self.definitions: dict[str, Any] = {}
        self.named_schemas: dict[str, SchemaNode] = {}

    def parse_file(self, file_path: str | Path) -> ParsedSpec:
        """Parse OpenAPI specification from file."""
        path = Path(file_path)
        with path.open(encoding="utf-8") as f:
            self.spec_data = json.load(f)
        return self._parse_spec()

    def parse_dict(self, spec_dict: dict[str, Any]) -> ParsedSpec:
        """Parse OpenAPI specification from dictionary."""
        self.spec_data = spec_dict
        return self._parse_spec()

    def _parse_spec(self) -> ParsedSpec:
        """Parse the loaded specification."""
        if not self.spec_data:
            msg = "No specification data loaded"
            raise ValueError(msg)

        self.definitions = dict(
            self.spec_data.get("definitions") or self.spec_data.get("components", {}).get("schemas") or {}
        )
        self.named_schemas = {}
        for name in self.definitions:
            self._named_schema(name)

        operations = self._parse_operations()
        logger.debug("Parsed %d operations and %d named schemas", len(operations), len(self.named_schemas))

        return ParsedSpec(
            info=self.spec_data.get("info", {}),
            operations=operations,
            schemas=dict(self.named_schemas),
        )

    def _resolve_reference(self, ref: str) -> dict[str, Any]:
        """Resolve a JSON reference."""
        if not self.spec_data:
            return {}

        resolved: Any = self.spec_data
        for part in ref.split("/")[1:]:  # Skip '#'
            if not isinstance(resolved, dict):
                return {}
            resolved = resolved.get(part)
        return resolved or {}

    def _named_schema(self, name: str) -> SchemaNode:
        """Return the shared node of a definition, building it on first use."""
        if name in self.named_schemas:
            return self.named_schemas[name]

        node = SchemaNode(type_name=name)
        # Memoised before the children are built so cyclic definitions terminate
        self.named_schemas[name] = node

        data = self.definitions.get(name)
        if not isinstance(data, dict):
            logger.info("Definition '%s' is missing or malformed; treating it as untyped", name)
            return node

        if "$ref" in data and len(data) == 1:
            target = self._schema_from_ref(data["$ref"])
            node.reference = target if target is not node else None
            return node

        self._fill_schema(node, data)
        return node

    def _schema_from_ref(self, ref: str) -> SchemaNode:
        ref_name = _extract_ref_name(ref)
        if ref_name in self.definitions or ref_name in self.named_schemas:
            return self._named_schema(ref_name)
        # A ref outside the definitions section: parse inline
        return self._parse_schema(self._resolve_reference(ref)) or SchemaNode()

    def _parse_schema(self, data: Any) -> SchemaNode | None:
        """Convert a schema object into a node."""
        if data is None:
            return None
        if not isinstance(data, dict):
            # Boolean schemas (true/false) describe anything
            return SchemaNode()

        nullable = bool(data.get("nullable") or data.get("x-nullable"))

        if "$ref" in data:
            target = self._schema_from_ref(data["$ref"])
            return SchemaNode(reference=target, nullable=True) if nullable else target

        for key in ("oneOf", "anyOf"):
            if key in data and isinstance(data[key], list):
                return self._parse_union(data[key], nullable=nullable)

        if "allOf" in data and isinstance(data["allOf"], list):
            parts = data["allOf"]
            extra_keys = set(data) - {"allOf", "nullable", "x-nullable", "description"}
            if len(parts) == 1 and not extra_keys and isinstance(parts[0], dict) and "$ref" in parts[0]:
                target = self._schema_from_ref(parts[0]["$ref"])
                return SchemaNode(reference=target, nullable=True) if nullable else target

        node = SchemaNode()
        self._fill_schema(node, data)
        return node

    def _parse_union(self, variants: list[Any], *, nullable: bool) -> SchemaNode:
        """Collapse a oneOf/anyOf into one node where that is unambiguous."""
        non_null = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
        nullable = nullable or len(non_null) < len(variants)

        if len(non_null) == 1:
            node = self._parse_schema(non_null[0]) or SchemaNode()
            if not nullable:
                return node
            if node.is_named:
                return SchemaNode(reference=node, nullable=True)
            node.nullable = True
            return node

        logger.debug("Polymorphic union of %d variants degrades to an untyped object", len(non_null))
        return SchemaNode(type=JsonObjectType.OBJECT, nullable=nullable)

    def _fill_schema(self, node: SchemaNode, data: dict[str, Any]) -> None:
        """Populate a node from its schema object."""
        schema_format = data.get("format")
        node.type = _type_flags(data.get("type"), schema_format)
        node.format = schema_format
        node.nullable = node.nullable or bool(data.get("nullable") or data.get("x-nullable"))
        node.description = data.get("description")
        node.default = data.get("default")
        node.enum_values = list(data.get("enum") or [])

        if "items" in data:
            node.items = self._parse_schema(data["items"])

        additional = data.get("additionalProperties")
        if isinstance(additional, dict):
            node.additional_properties = self._parse_schema(additional)
        elif additional is True:
            node.additional_properties = True

        node.required = list(data.get("required") or [])
        for prop_name, prop_data in (data.get("properties") or {}).items():
            prop = self._parse_schema(prop_data)
            if prop is not None:
                node.properties[prop_name] = prop

        for part in data.get("allOf") or []:
            self._merge_all_of_part(node, part)

        if node.type == JsonObjectType.NONE:
            if node.properties or node.additional_properties not in (None, False):
                node.type = JsonObjectType.OBJECT
            elif node.items is not None:
                node.type = JsonObjectType.ARRAY

    def _merge_all_of_part(self, node: SchemaNode, part: Any) -> None:
        """Inline the properties of one allOf member into ``node``."""
        sub = self._parse_schema(part)
        if sub is None:
            return
        actual = sub.actual_schema
        for prop_name, prop in actual.properties.items():
            node.properties.setdefault(prop_name, prop)
        node.required.extend(name for name in actual.required if name not in node.required)
        if actual.properties or JsonObjectType.OBJECT in actual.type:
            node.type |= JsonObjectType.OBJECT

    def _parse_operations(self) -> list[Operation]:
        """Parse all operations from paths."""
        operations: list[Operation] = []
        if not self.spec_data:
            return operations

        for path, path_item in (self.spec_data.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            shared_parameters = path_item.get("parameters") or []
            for method in _HTTP_METHODS:
                operation_data = path_item.get(method)
                if isinstance(operation_data, dict):
                    operations.append(self._parse_operation(path, method, operation_data, shared_parameters))

        return operations

    def _parse_operation(
        self,
        path: str,
        method: str,
        operation_data: dict[str, Any],
        shared_parameters: list[Any],
    ) -> Operation:
        """Parse a single operation."""
        operation_id = operation_data.get("operationId")
        if operation_id is not None:
            operation_id = str(operation_id)
        tags = operation_data.get("tags") or []
        if not isinstance(tags, list):
            tags = [tags]

        return Operation(
            method=method.upper(),
            path=path,
            operation_id=operation_id,
            tags=[str(tag) for tag in tags if tag is not None],
            parameters=self._parse_operation_parameters(operation_data, shared_parameters),
            responses=self._parse_responses(operation_data.get("responses"), operation_id),
            summary=operation_data.get("summary"),
            description=operation_data.get("description"),
            deprecated=bool(operation_data.get("deprecated", False)),
        )

    def _parse_operation_parameters(
        self,
        operation_data: dict[str, Any],
        shared_parameters: list[Any],
    ) -> list[Parameter] | None:
        """Merge path-level and operation-level parameters plus the request body.

        Returns None when the operation's parameter list is malformed.
        """
        raw_parameters = operation_data.get("parameters", [])
        if not isinstance(raw_parameters, list):
            return None

        merged: dict[tuple[str, str], dict[str, Any]] = {}
        for param_data in [*shared_parameters, *raw_parameters]:
            if isinstance(param_data, dict) and "$ref" in param_data:
                param_data = self._resolve_reference(param_data["$ref"])
            if not isinstance(param_data, dict) or not param_data.get("name"):
                continue
            merged[(param_data["name"], param_data.get("in", "query"))] = param_data

        parameters = [self._parse_parameter(param_data) for param_data in merged.values()]
        parameters.extend(self._parse_request_body(operation_data.get("requestBody")))
        return parameters

    def _parse_parameter(self, param_data: dict[str, Any]) -> Parameter:
        """Parse a parameter."""
        location = _parameter_location(param_data.get("in"))

        if "schema" in param_data:
            schema = self._parse_schema(param_data["schema"])
        else:
            # Swagger 2 non-body parameters carry the schema keywords inline
            schema = self._parse_schema(
                {key: param_data[key] for key in ("type", "format", "items", "enum", "default") if key in param_data}
            )
            if schema is not None and param_data.get("x-nullable"):
                schema.nullable = True

        collection_format = param_data.get("collectionFormat")
        if collection_format is None and param_data.get("explode") and schema is not None and schema.is_array:
            collection_format = CollectionFormat.MULTI.value

        return Parameter(
            name=param_data["name"],
            location=location,
            required=bool(param_data.get("required", location is ParameterLocation.PATH)),
            schema=schema,
            collection_format=_collection_format(collection_format),
            deprecated=bool(param_data.get("deprecated", False)),
            default=param_data.get("default", schema.default if schema is not None else None),
            description=param_data.get("description"),
        )

    def _parse_request_body(self, request_body: Any) -> list[Parameter]:
        """Turn an OpenAPI 3 request body into body or form parameters."""
        if isinstance(request_body, dict) and "$ref" in request_body:
            request_body = self._resolve_reference(request_body["$ref"])
        if not isinstance(request_body, dict):
            return []

        content = request_body.get("content") or {}
        required = bool(request_body.get("required", False))

        for content_type in _FORM_CONTENT_TYPES:
            if content_type in content:
                return self._parse_form_parameters(content[content_type].get("schema"))

        selected = _select_content(content)
        if selected is None:
            return []
        _, media = selected

        return [
            Parameter(
                name=request_body.get("x-name", "body"),
                location=ParameterLocation.BODY,
                required=required,
                schema=self._parse_schema(media.get("schema")),
                description=request_body.get("description"),
            )
        ]

    def _parse_form_parameters(self, schema_data: Any) -> list[Parameter]:
        schema = self._parse_schema(schema_data)
        if schema is None:
            return []

        actual = schema.actual_schema
        return [
            Parameter(
                name=prop_name,
                location=ParameterLocation.FORM_DATA,
                required=prop_name in actual.required,
                schema=prop,
                description=prop.description,
            )
            for prop_name, prop in actual.properties.items()
        ]

    def _parse_responses(self, responses_data: Any, operation_id: str | None) -> dict[str, Response] | None:
        """Parse the status code map; None when it is not a mapping."""
        if not isinstance(responses_data, dict):
            return None

        return {
            str(status_code): self._parse_response(str(status_code), response_data, operation_id)
            for status_code, response_data in responses_data.items()
        }

    def _parse_response(self, status_code: str, response_data: Any, operation_id: str | None) -> Response:
        """Parse a response."""
        if isinstance(response_data, dict) and "$ref" in response_data:
            response_data = self._resolve_reference(response_data["$ref"])
        if not isinstance(response_data, dict):
            response_data = {}

        content = response_data.get("content") or {}
        content_types = list(content)
        if "schema" in response_data:
            schema_data = response_data["schema"]
        else:
            selected = _select_content(content)
            schema_data = selected[1].get("schema") if selected else None

        schema = self._response_schema(status_code, schema_data, operation_id)

        return Response(
            status_code=status_code,
            schema=schema,
            nullable=bool(response_data.get("x-nullable", False)),
            description=response_data.get("description", ""),
            content_types=content_types,
        )

    def _response_schema(self, status_code: str, schema_data: Any, operation_id: str | None) -> SchemaNode | None:
        """Parse a response schema, promoting inline success objects to named types."""
        if self._should_create_response_model(schema_data, status_code) and operation_id:
            model_name = f"{pascalcase(normalize_identifier(operation_id))}Response"
            if model_name not in self.named_schemas:
                self.definitions.setdefault(model_name, schema_data)
                if self.definitions[model_name] is schema_data:
                    return self._named_schema(model_name)
        return self._parse_schema(schema_data)

    @staticmethod
    def _should_create_response_model(schema_data: Any, status_code: str) -> bool:
        """Determine if we should create a response model for this schema."""
        if not isinstance(schema_data, dict) or not status_code.startswith("2") or "$ref" in schema_data:
            return False
        return schema_data.get("type", "object") == "object" and bool(schema_data.get("properties"))
