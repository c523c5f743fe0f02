"""
Schema to target-language type resolution.

``TypeResolver`` maps schema nodes to type expressions for one target
language. Named object and enum schemas are registered once (phase one
of a generation pass) and then resolve to the same name on every lookup.
Anonymous shapes and named arrays, maps, files and primitives are resolved
structurally on each call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from oas_model_generator.errors import UnregisteredTypeError
from oas_model_generator.generator.languages import TargetLanguage
from oas_model_generator.parser.oas_parser import CollectionFormat, JsonObjectType, SchemaNode
from oas_model_generator.utils.string_case import normalize_identifier

logger = logging.getLogger(__name__)

_PRIMITIVE_NAMES = {
    JsonObjectType.STRING: "string",
    JsonObjectType.INTEGER: "integer",
    JsonObjectType.NUMBER: "number",
    JsonObjectType.BOOLEAN: "boolean",
}


@dataclass(frozen=True)
class TypeContext:
    """How a schema is being used when its type is resolved."""

    nullable: bool = False
    fallback_name: str = "Anonymous"
    collection_format: CollectionFormat | None = None
    is_response: bool = False


class BaseTypeNameResolver(Protocol):
    """Resolution of the shapes the type resolver does not branch on itself."""

    def base_type_name(self, schema: SchemaNode, nullable: bool, fallback_name: str) -> str: ...


class BaseTypeResolver:
    """Primitive and enum mapping driven by a language record.

    Unknown or ambiguous primitive tags degrade to the language's any type.
    """

    def __init__(self, language: TargetLanguage) -> None:
        self.language = language

    def base_type_name(self, schema: SchemaNode, nullable: bool, fallback_name: str) -> str:
        primitive = self._primitive_name(schema.type)
        if primitive is None:
            if schema.type not in (JsonObjectType.NONE, JsonObjectType.OBJECT) or schema.properties:
                logger.info(
                    "Cannot map schema for '%s' (type %s) to a %s type; using %s",
                    fallback_name,
                    schema.type,
                    self.language.name,
                    self.language.any_type,
                )
            return self._nullable(self.language.any_type, nullable)

        type_name = self.language.primitive_type(primitive, schema.format)
        if type_name is None:
            logger.info(
                "No %s mapping for primitive '%s' of '%s'; using %s",
                self.language.name,
                primitive,
                fallback_name,
                self.language.any_type,
            )
            type_name = self.language.any_type
        return self._nullable(type_name, nullable)

    def _nullable(self, type_name: str, nullable: bool) -> str:
        return self.language.nullable_of(type_name) if nullable else type_name

    @staticmethod
    def _primitive_name(flags: JsonObjectType) -> str | None:
        flags &= ~JsonObjectType.NULL
        if flags == JsonObjectType.INTEGER | JsonObjectType.NUMBER:
            return "number"
        return _PRIMITIVE_NAMES.get(flags)


def schema_fingerprint(schema: SchemaNode) -> tuple[Any, ...]:
    """Structural identity of a schema, referring to nested named types by name."""
    return _fingerprint(schema, top_level=True)


def _fingerprint(schema: SchemaNode | bool | None, *, top_level: bool = False) -> tuple[Any, ...]:
    if schema is None or isinstance(schema, bool):
        return ("literal", schema)
    if schema.reference is not None:
        return ("ref", schema.nullable, _fingerprint(schema.reference))
    if schema.is_type_definition and not top_level:
        return ("named", schema.type_name)
    return (
        "shape",
        schema.type.value,
        schema.format,
        schema.nullable,
        tuple(repr(value) for value in schema.enum_values),
        _fingerprint(schema.items),
        _fingerprint(schema.additional_properties),
        tuple((name, _fingerprint(prop)) for name, prop in sorted(schema.properties.items())),
        tuple(sorted(schema.required)),
    )


def iter_named_schemas(roots: Iterable[SchemaNode | None]) -> Iterator[SchemaNode]:
    """Yield every type definition reachable from ``roots``, each once, parents first."""
    seen: set[int] = set()
    stack = [root for root in reversed(list(roots)) if root is not None]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.is_type_definition:
            yield node

        children: list[SchemaNode] = []
        if node.reference is not None:
            children.append(node.reference)
        if node.items is not None:
            children.append(node.items)
        if isinstance(node.additional_properties, SchemaNode):
            children.append(node.additional_properties)
        children.extend(node.properties.values())
        stack.extend(reversed(children))


class TypeResolver:
    """Resolves schema nodes to type expressions of one target language."""

    def __init__(self, language: TargetLanguage, base_resolver: BaseTypeNameResolver | None = None) -> None:
        self.language = language
        self.base_resolver = base_resolver or BaseTypeResolver(language)
        self._names_by_node: dict[int, tuple[SchemaNode, str]] = {}
        self._names_by_identity: dict[str, list[tuple[tuple[Any, ...], str]]] = {}
        self._definitions: dict[str, SchemaNode] = {}
        self._frozen = False
        self._inlining: set[int] = set()

    @property
    def named_types(self) -> Mapping[str, SchemaNode]:
        """Type definitions to emit, one per unique name."""
        return dict(self._definitions)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def register_named_types(self, schemas: Iterable[SchemaNode]) -> None:
        """Assign a type name to each named schema (phase one)."""
        if self._frozen:
            msg = "Cannot register named types after the type cache was frozen"
            raise RuntimeError(msg)
        for schema in schemas:
            actual = schema.actual_schema
            if actual.is_type_definition:
                self._register(actual)

    def freeze(self) -> None:
        """Make the named-type cache read-only for the model building phase."""
        self._frozen = True

    def resolve(self, schema: SchemaNode | None, context: TypeContext | None = None) -> str:
        """Resolve a schema node to a type expression.

        Args:
            schema: The node to resolve; ``None`` means no content.
            context: Usage of the node (nullability, collection format, response position).

        Returns:
            The target-language type expression.
        """
        context = context or TypeContext()
        if schema is None:
            return self.language.void_type

        nullable = context.nullable or schema.is_nullable
        actual = schema.actual_schema
        nullable = nullable or actual.is_nullable

        if actual.is_type_definition:
            return self._nullable(self._named_type_name(actual), nullable)

        if actual.is_file and not actual.is_array:
            return self._file_type(context)

        if actual.is_array or actual.is_dictionary:
            if id(actual) in self._inlining:
                logger.info(
                    "Recursive container '%s' cannot be inlined; using %s",
                    actual.type_name or context.fallback_name,
                    self.language.any_type,
                )
                return self._nullable(self.language.any_type, nullable)
            self._inlining.add(id(actual))
            try:
                return self._nullable(self._container_type(actual, context), nullable)
            finally:
                self._inlining.discard(id(actual))

        return self.base_resolver.base_type_name(actual, nullable, context.fallback_name)

    def _container_type(self, schema: SchemaNode, context: TypeContext) -> str:
        if schema.is_array:
            if schema.items is not None:
                item_type = self.resolve(schema.items, TypeContext(fallback_name=f"{context.fallback_name}Item"))
            elif schema.is_file:
                item_type = self.language.file_parameter_type
            else:
                item_type = self.language.any_type
            return self.language.sequence_of(item_type)

        value_schema = schema.additional_properties
        if isinstance(value_schema, SchemaNode):
            value_type = self.resolve(value_schema, TypeContext(fallback_name=f"{context.fallback_name}Value"))
        else:
            value_type = self.language.any_type
        return self.language.dictionary_of(value_type)

    def _file_type(self, context: TypeContext) -> str:
        if context.is_response:
            return self.language.file_response_type
        if context.collection_format is CollectionFormat.MULTI:
            return self.language.file_sequence_type
        return self.language.file_parameter_type

    def _nullable(self, type_name: str, nullable: bool) -> str:
        return self.language.nullable_of(type_name) if nullable else type_name

    def _named_type_name(self, schema: SchemaNode) -> str:
        cached = self._names_by_node.get(id(schema))
        if cached is not None:
            return cached[1]
        if self._frozen:
            raise UnregisteredTypeError(schema.type_name or "")
        return self._register(schema)

    def _register(self, schema: SchemaNode) -> str:
        cached = self._names_by_node.get(id(schema))
        if cached is not None:
            return cached[1]

        identity = schema.type_name or ""
        fingerprint = schema_fingerprint(schema)
        candidates = self._names_by_identity.setdefault(identity, [])
        for candidate_fingerprint, candidate_name in candidates:
            if candidate_fingerprint == fingerprint:
                self._names_by_node[id(schema)] = (schema, candidate_name)
                return candidate_name

        base_name = self.language.type_name(normalize_identifier(identity)) or "Anonymous"
        name = base_name
        counter = 2
        while name in self._definitions:
            name = f"{base_name}{counter}"
            counter += 1

        logger.debug("Registered named type '%s' as %s", identity, name)
        candidates.append((fingerprint, name))
        self._definitions[name] = schema
        self._names_by_node[id(schema)] = (schema, name)
        return name
