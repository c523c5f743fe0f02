"""Exceptions raised by the client model resolution engine."""

from __future__ import annotations

from collections.abc import Sequence


class GenerationError(Exception):
    """Base class for every deliberate failure of the resolution engine."""


class UnknownLanguageError(GenerationError, ValueError):
    """Raised when a target language tag has no registered backend."""

    def __init__(self, tag: str, known: Sequence[str]) -> None:
        self.tag = tag
        self.known = tuple(known)
        super().__init__(f"Unknown target language '{tag}' (expected one of: {', '.join(self.known)})")


class InvalidOperationError(GenerationError):
    """Raised when an operation lacks input the engine needs to build it."""

    def __init__(self, operation_key: str, reason: str) -> None:
        self.operation_key = operation_key
        self.reason = reason
        super().__init__(f"{operation_key}: {reason}")


class NameCollisionError(GenerationError):
    """Raised when two parameters of one operation resolve to the same identifier."""

    def __init__(self, operation_key: str, identifier: str, parameter_names: Sequence[str]) -> None:
        self.operation_key = operation_key
        self.identifier = identifier
        self.parameter_names = tuple(parameter_names)
        conflicting = ", ".join(f"'{name}'" for name in self.parameter_names)
        super().__init__(f"{operation_key}: parameters {conflicting} all resolve to the identifier '{identifier}'")


class UnregisteredTypeError(GenerationError):
    """Raised when a named type is resolved after the type cache was frozen without it."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Named type '{type_name}' was not registered before model building started")
