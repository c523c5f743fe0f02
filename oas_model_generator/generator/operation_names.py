"""
Operation naming policies.

A policy assigns every operation a client (group) name and a method name
such that no two operations of one client share a method name. Policies
are plain values: anything with ``assign(operations)`` works, and the
bundled presets are ``OperationNameGenerator`` instances built from two
naming functions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final, Protocol

from oas_model_generator.parser.oas_parser import Operation
from oas_model_generator.utils.string_case import normalize_identifier, pascalcase

DEFAULT_CLIENT_NAME: Final = ""

OperationKey = str


@dataclass(frozen=True)
class OperationName:
    """Client group and method name assigned to one operation."""

    client: str
    method: str


class OperationNamingPolicy(Protocol):
    def assign(self, operations: Iterable[Operation]) -> dict[OperationKey, OperationName]: ...


def _identifier(text: str) -> str:
    return pascalcase(normalize_identifier(text))


def _path_segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def _is_path_parameter(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


def _segments_method_name(method: str, segments: list[str]) -> str:
    """Verb followed by the literal segments, ending in ``By<Param>`` for a trailing parameter."""
    name = pascalcase(method.lower())
    name += "".join(_identifier(segment) for segment in segments if not _is_path_parameter(segment))
    if segments and _is_path_parameter(segments[-1]):
        name += f"By{_identifier(segments[-1][1:-1])}"
    return name


def path_method_name(operation: Operation) -> str:
    """Synthesize a method name from the HTTP verb and the full path.

    Examples:
        GET /pets            -> GetPets
        GET /pets/{petId}    -> GetPetsByPetId
        POST /pets/{id}/toys -> PostPetsToys
    """
    return _segments_method_name(operation.method, _path_segments(operation.path))


def first_tag_client_name(operation: Operation) -> str:
    return _identifier(operation.tags[0]) if operation.tags else DEFAULT_CLIENT_NAME


def operation_id_method_name(operation: Operation) -> str:
    if operation.operation_id:
        return _identifier(operation.operation_id)
    return path_method_name(operation)


def operation_id_prefix_client_name(operation: Operation) -> str:
    """Client from the part of the operation id before the first underscore (``Pets_List``)."""
    operation_id = operation.operation_id or ""
    index = operation_id.find("_")
    return _identifier(operation_id[:index]) if index > 0 else DEFAULT_CLIENT_NAME


def operation_id_suffix_method_name(operation: Operation) -> str:
    operation_id = operation.operation_id or ""
    index = operation_id.find("_")
    if index > 0 and operation_id[index + 1 :]:
        return _identifier(operation_id[index + 1 :])
    return operation_id_method_name(operation)


def single_client_name(operation: Operation) -> str:  # noqa: ARG001
    return DEFAULT_CLIENT_NAME


def first_path_segment_client_name(operation: Operation) -> str:
    literal = [segment for segment in _path_segments(operation.path) if not _is_path_parameter(segment)]
    return _identifier(literal[0]) if literal else DEFAULT_CLIENT_NAME


def remaining_path_segments_method_name(operation: Operation) -> str:
    segments = _path_segments(operation.path)
    for index, segment in enumerate(segments):
        if not _is_path_parameter(segment):
            return _segments_method_name(operation.method, segments[index + 1 :])
    return _segments_method_name(operation.method, segments)


@dataclass(frozen=True)
class OperationNameGenerator:
    """Naming policy composed of a client-name and a method-name function."""

    client_name: Callable[[Operation], str]
    method_name: Callable[[Operation], str]

    def assign(self, operations: Iterable[Operation]) -> dict[OperationKey, OperationName]:
        """Name every operation, suffixing repeated method names within a client.

        Method names are compared case-insensitively so that language casing
        applied later cannot reintroduce a collision.
        """
        names: dict[OperationKey, OperationName] = {}
        taken: dict[str, set[str]] = {}

        for operation in operations:
            client = self.client_name(operation)
            base_method = self.method_name(operation) or path_method_name(operation)
            used = taken.setdefault(client.lower(), set())

            method = base_method
            counter = 2
            while method.lower() in used:
                method = f"{base_method}{counter}"
                counter += 1

            used.add(method.lower())
            names[operation.key] = OperationName(client=client, method=method)

        return names


FIRST_TAG_AND_OPERATION_ID: Final = OperationNameGenerator(
    client_name=first_tag_client_name,
    method_name=operation_id_method_name,
)
OPERATION_ID_PREFIX: Final = OperationNameGenerator(
    client_name=operation_id_prefix_client_name,
    method_name=operation_id_suffix_method_name,
)
SINGLE_CLIENT: Final = OperationNameGenerator(
    client_name=single_client_name,
    method_name=operation_id_method_name,
)
PATH_SEGMENTS: Final = OperationNameGenerator(
    client_name=first_path_segment_client_name,
    method_name=remaining_path_segments_method_name,
)

OPERATION_NAME_GENERATORS: Final[dict[str, OperationNameGenerator]] = {
    "first-tag": FIRST_TAG_AND_OPERATION_ID,
    "operation-id": OPERATION_ID_PREFIX,
    "single-client": SINGLE_CLIENT,
    "path-segments": PATH_SEGMENTS,
}
