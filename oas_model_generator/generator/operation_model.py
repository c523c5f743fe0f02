"""
Operation model building.

``generate_models`` runs a generation pass in two phases. Phase one
assigns client and method names to every operation and registers every
named schema with the type resolver, then freezes the type cache. Phase
two builds one immutable ``OperationModel`` per operation; failures are
collected per operation instead of aborting the pass.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from oas_model_generator.errors import GenerationError, InvalidOperationError
from oas_model_generator.generator.languages import TargetLanguage, get_target_language
from oas_model_generator.generator.operation_names import (
    FIRST_TAG_AND_OPERATION_ID,
    OperationKey,
    OperationName,
    OperationNamingPolicy,
)
from oas_model_generator.generator.parameter_names import ParameterNameResolver
from oas_model_generator.generator.responses import ResponseModel, ResponseModelBuilder
from oas_model_generator.generator.type_resolver import TypeContext, TypeResolver, iter_named_schemas
from oas_model_generator.parser.oas_parser import Operation, Parameter, ParameterLocation, SchemaNode
from oas_model_generator.utils.string_case import normalize_identifier

logger = logging.getLogger(__name__)

CONTROLLER_TOKEN = "{controller}"


@dataclass(frozen=True)
class GeneratorSettings:
    """Options of one generation pass, passed explicitly to every component."""

    language: str = "csharp"
    generate_optional_parameters: bool = False
    wrap_responses: bool = False
    response_class: str = "SwaggerResponse"
    operation_name_generator: OperationNamingPolicy = FIRST_TAG_AND_OPERATION_ID
    class_name: str = "{controller}Client"
    generate_client_classes: bool = True
    generate_client_interfaces: bool = False
    generate_dto_types: bool = True

    @property
    def target_language(self) -> TargetLanguage:
        return get_target_language(self.language)

    def response_class_name(self, client_name: str) -> str:
        return self.response_class.replace(CONTROLLER_TOKEN, client_name)

    def client_class_name(self, client_name: str) -> str:
        return self.class_name.replace(CONTROLLER_TOKEN, client_name)


@dataclass(frozen=True)
class ParameterModel:
    """Resolved parameter of an operation signature."""

    name: str
    variable_name: str
    type: str
    location: ParameterLocation
    is_required: bool
    is_nullable: bool = False
    is_deprecated: bool = False
    is_file: bool = False
    is_array: bool = False
    default: Any = None
    description: str | None = None

    @property
    def is_optional(self) -> bool:
        return not self.is_required


@dataclass(frozen=True)
class OperationModel:
    """Fully resolved operation, ready for rendering."""

    operation_key: OperationKey
    method: str
    path: str
    client_name: str
    method_name: str
    client_class_name: str
    parameters: tuple[ParameterModel, ...]
    responses: tuple[ResponseModel, ...]
    primary_response: ResponseModel | None
    unwrapped_result_type: str
    result_type: str
    exception_type: str
    summary: str | None = None
    is_deprecated: bool = False

    def _parameters_in(self, location: ParameterLocation) -> list[ParameterModel]:
        return [parameter for parameter in self.parameters if parameter.location is location]

    @property
    def path_parameters(self) -> list[ParameterModel]:
        return self._parameters_in(ParameterLocation.PATH)

    @property
    def query_parameters(self) -> list[ParameterModel]:
        return self._parameters_in(ParameterLocation.QUERY)

    @property
    def header_parameters(self) -> list[ParameterModel]:
        return self._parameters_in(ParameterLocation.HEADER)

    @property
    def form_parameters(self) -> list[ParameterModel]:
        return self._parameters_in(ParameterLocation.FORM_DATA)

    @property
    def body_parameter(self) -> ParameterModel | None:
        return next(iter(self._parameters_in(ParameterLocation.BODY)), None)

    @property
    def has_result_type(self) -> bool:
        return self.primary_response is not None and self.primary_response.has_type

    @property
    def has_only_default_response(self) -> bool:
        return len(self.responses) == 1 and self.responses[0].status_code.lower() == "default"


@dataclass(frozen=True)
class OperationFailure:
    operation_key: OperationKey
    reason: str


@dataclass(frozen=True)
class GenerationReport:
    """Outcome of a generation pass: built models and per-operation failures."""

    models: tuple[OperationModel, ...]
    failures: tuple[OperationFailure, ...] = ()
    named_types: Mapping[str, SchemaNode] = field(default_factory=dict)

    @property
    def succeeded(self) -> tuple[OperationKey, ...]:
        return tuple(model.operation_key for model in self.models)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)

    @property
    def clients(self) -> dict[str, list[OperationModel]]:
        """Models grouped by client name, in operation order."""
        grouped: dict[str, list[OperationModel]] = {}
        for model in self.models:
            grouped.setdefault(model.client_name, []).append(model)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "models": [asdict(model) for model in self.models],
            "failures": [asdict(failure) for failure in self.failures],
            "named_types": sorted(self.named_types),
        }


class OperationModelBuilder:
    """Builds the model of one operation from phase-one results."""

    def __init__(
        self,
        settings: GeneratorSettings,
        type_resolver: TypeResolver,
        names: Mapping[OperationKey, OperationName],
    ) -> None:
        self.settings = settings
        self.language = settings.target_language
        self.type_resolver = type_resolver
        self.names = names
        self.parameter_names = ParameterNameResolver(self.language)
        self.responses = ResponseModelBuilder(self.language, type_resolver)

    def build(self, operation: Operation) -> OperationModel:
        """Build the model of one operation.

        Raises:
            InvalidOperationError: If the operation lacks a parameter list, a
                valid response map, or an assigned name.
            NameCollisionError: If two parameters resolve to the same identifier.
        """
        if operation.parameters is None:
            raise InvalidOperationError(operation.key, "operation has no parameter list")
        name = self.names.get(operation.key)
        if name is None:
            raise InvalidOperationError(operation.key, "no client/method name was assigned in the naming pass")

        variable_names = self.parameter_names.resolve_all(operation.parameters, operation.key)
        parameter_models = [
            self._parameter_model(parameter, variable_name)
            for parameter, variable_name in zip(operation.parameters, variable_names)
        ]
        if self.settings.generate_optional_parameters:
            # sorted() is stable: declaration order holds within each group
            parameter_models = sorted(parameter_models, key=lambda parameter: not parameter.is_required)

        responses, primary = self.responses.build(operation)
        unwrapped_result_type = primary.type if primary is not None else self.language.void_type

        return OperationModel(
            operation_key=operation.key,
            method=operation.method.upper(),
            path=operation.path,
            client_name=name.client,
            method_name=self.language.method_name(name.method),
            client_class_name=self.settings.client_class_name(name.client),
            parameters=tuple(parameter_models),
            responses=responses,
            primary_response=primary,
            unwrapped_result_type=unwrapped_result_type,
            result_type=self.result_type(unwrapped_result_type, name.client),
            exception_type=self.responses.exception_type(operation),
            summary=operation.summary,
            is_deprecated=operation.deprecated,
        )

    def result_type(self, unwrapped_result_type: str, client_name: str) -> str:
        """Wrap the unwrapped result in the response class (optional) and the async type."""
        language = self.language
        if unwrapped_result_type == language.file_response_type:
            return language.async_of(language.file_response_type)

        if self.settings.wrap_responses:
            wrapper = self.settings.response_class_name(client_name)
            if unwrapped_result_type == language.void_type:
                return language.async_of(wrapper)
            return language.async_of(language.generic_of(wrapper, unwrapped_result_type))

        return language.async_of(unwrapped_result_type)

    def _parameter_model(self, parameter: Parameter, variable_name: str) -> ParameterModel:
        schema = parameter.schema
        actual = schema.actual_schema if schema is not None else None
        # Optional parameters can be omitted, so their type admits null
        nullable = not parameter.required or (actual is not None and (schema.is_nullable or actual.is_nullable))
        parameter_type = self.type_resolver.resolve(
            schema,
            TypeContext(
                nullable=nullable,
                fallback_name=self.language.type_name(normalize_identifier(parameter.name)),
                collection_format=parameter.collection_format,
            ),
        )
        if schema is None:
            parameter_type = self.language.any_type

        return ParameterModel(
            name=parameter.name,
            variable_name=variable_name,
            type=parameter_type,
            location=parameter.location,
            is_required=parameter.required,
            is_nullable=nullable,
            is_deprecated=parameter.deprecated,
            is_file=actual is not None and actual.is_file,
            is_array=actual is not None and actual.is_array,
            default=parameter.default,
            description=parameter.description,
        )


def _schema_roots(operations: Iterable[Operation]) -> Iterator[SchemaNode | None]:
    """Every schema an operation refers to, tolerating malformed operations."""
    for operation in operations:
        for parameter in operation.parameters or []:
            yield parameter.schema
        responses = operation.responses if isinstance(operation.responses, dict) else {}
        for response in responses.values():
            yield getattr(response, "schema", None)


def generate_models(
    operations: Iterable[Operation],
    settings: GeneratorSettings,
    schemas: Mapping[str, SchemaNode] | None = None,
) -> GenerationReport:
    """Run a full two-phase generation pass.

    Args:
        operations: The parsed operations, in declaration order.
        settings: Options of the pass.
        schemas: Named schemas to emit even when no operation uses them.

    Returns:
        The report listing built models and failed operations.
    """
    operations = list(operations)
    language = settings.target_language

    names = settings.operation_name_generator.assign(operations)
    type_resolver = TypeResolver(language)
    roots = [*(schemas or {}).values(), *_schema_roots(operations)]
    type_resolver.register_named_types(iter_named_schemas(roots))
    type_resolver.freeze()
    logger.debug("Naming pass assigned %d operations; %d named types", len(names), len(type_resolver.named_types))

    builder = OperationModelBuilder(settings, type_resolver, names)
    models: list[OperationModel] = []
    failures: list[OperationFailure] = []
    for operation in operations:
        try:
            models.append(builder.build(operation))
        except GenerationError as error:
            logger.warning("Skipping operation %s: %s", operation.key, error)
            failures.append(OperationFailure(operation_key=operation.key, reason=str(error)))

    return GenerationReport(models=tuple(models), failures=tuple(failures), named_types=type_resolver.named_types)
