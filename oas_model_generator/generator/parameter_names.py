"""
Parameter variable naming.

Source parameter names are turned into identifiers of the target language:
normalized, cased, disambiguated against the other parameters of the same
operation, and escaped when they collide with a reserved word.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from oas_model_generator.errors import NameCollisionError
from oas_model_generator.generator.languages import TargetLanguage
from oas_model_generator.parser.oas_parser import Parameter
from oas_model_generator.utils.string_case import normalize_identifier, pascalcase

_SEPARATOR_PATTERN: Final = re.compile(r"[\-\.]")
_DROPPED_CHARACTERS_PATTERN: Final = re.compile(r"[\$\[\]]")


def base_variable_name(parameter: Parameter, all_parameters: Sequence[Parameter], language: TargetLanguage) -> str:
    """Compute the unescaped variable name of a parameter.

    When another parameter of the operation has the same source name (for
    example ``id`` in both path and query) the location is appended.

    Args:
        parameter: The parameter to name.
        all_parameters: Every parameter of the operation, including ``parameter``.
        language: Target language providing the identifier casing.

    Returns:
        A valid, unescaped identifier.
    """
    cleaned = _DROPPED_CHARACTERS_PATTERN.sub("", _SEPARATOR_PATTERN.sub("_", parameter.name))
    name = language.variable_name(cleaned)

    if sum(1 for other in all_parameters if other.name == parameter.name) > 1:
        name = language.variable_name(f"{cleaned}_{pascalcase(parameter.location.value)}")

    return normalize_identifier(name) or language.variable_name("parameter")


class ParameterNameResolver:
    """Produces unique, non-reserved variable names for operation parameters."""

    def __init__(self, language: TargetLanguage) -> None:
        self.language = language

    def resolve_variable_name(self, parameter: Parameter, all_parameters: Sequence[Parameter]) -> str:
        """Resolve one parameter's identifier, escaping reserved words."""
        return self.language.escape_identifier(base_variable_name(parameter, all_parameters, self.language))

    def resolve_all(self, parameters: Sequence[Parameter], operation_key: str = "") -> list[str]:
        """Resolve every parameter of an operation.

        Returns:
            Identifiers aligned with ``parameters``.

        Raises:
            NameCollisionError: If two parameters resolve to the same identifier.
        """
        names = [self.resolve_variable_name(parameter, parameters) for parameter in parameters]

        owners: dict[str, Parameter] = {}
        for parameter, name in zip(parameters, names):
            if name in owners:
                raise NameCollisionError(operation_key, name, [owners[name].name, parameter.name])
            owners[name] = parameter
        return names
