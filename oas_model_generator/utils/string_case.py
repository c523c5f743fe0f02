"""
String case conversion utilities for client model generation.

This module provides the case conversions used to turn source identifiers
(operation ids, tags, parameter names, schema names) into target-language
identifiers.

Based on https://github.com/okunishinishi/python-stringcase
with additional identifier normalization helpers.
"""

import re
from collections.abc import Callable
from typing import Final

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[\-\.\s]")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z])([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z0-9])([A-Z])")
_NON_IDENTIFIER_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")
_REPEATED_UNDERSCORE_PATTERN: Final = re.compile(r"_{2,}")


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Safely convert a string, returning empty string if input is None or empty."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Convert string into snake_case.

    Handles various formats including camelCase with acronyms.

    Args:
        string: String to convert.

    Returns:
        Snake case string.

    Examples:
        >>> snakecase("HelloWorld")
        'hello_world'
        >>> snakecase("hello-world")
        'hello_world'
        >>> snakecase("getHTTPResponse")
        'get_http_response'
    """

    def _snakecase(s: str) -> str:
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        return _REPEATED_UNDERSCORE_PATTERN.sub("_", s).lower()

    return _convert_if_not_empty(string, _snakecase)


def camelcase(string: str | None) -> str:
    """Convert string into camel case.

    A leading underscore is kept so that names like ``_id`` stay distinct
    from ``id``.

    Args:
        string: String to convert.

    Returns:
        Camel case string.

    Examples:
        >>> camelcase("hello_world")
        'helloWorld'
        >>> camelcase("Pet-Id")
        'petId'
        >>> camelcase("getHTTPResponse")
        'getHttpResponse'
    """

    def _camelcase(s: str) -> str:
        snake = snakecase(s)
        prefix = "_" if snake.startswith("_") else ""
        words = [word for word in snake.split("_") if word]
        if not words:
            return prefix
        return prefix + words[0] + "".join(word.capitalize() for word in words[1:])

    return _convert_if_not_empty(string, _camelcase)


def pascalcase(string: str | None) -> str:
    """Convert string into PascalCase.

    Args:
        string: String to convert.

    Returns:
        PascalCase string.

    Examples:
        >>> pascalcase("hello_world")
        'HelloWorld'
        >>> pascalcase("pet store")
        'PetStore'
        >>> pascalcase("getHTTPResponse")
        'GetHttpResponse'
    """

    def _pascalcase(s: str) -> str:
        return "".join(word.capitalize() for word in snakecase(s).split("_"))

    return _convert_if_not_empty(string, _pascalcase)


def normalize_identifier(name: str | None) -> str:
    """Normalize name to be a valid identifier in C-like languages.

    - Replaces invalid characters with underscores
    - Ensures it doesn't start with a digit
    - Preserves valid alphanumeric characters and underscores

    Args:
        name: The string to normalize.

    Returns:
        A valid identifier.

    Examples:
        >>> normalize_identifier("123invalid")
        '_123invalid'
        >>> normalize_identifier("valid@name")
        'valid_name'
    """

    def _normalize(s: str) -> str:
        normalized = _NON_IDENTIFIER_PATTERN.sub("_", s)

        if normalized and normalized[0].isdigit():
            normalized = f"_{normalized}"

        return normalized

    return _convert_if_not_empty(name, _normalize)


CASE_CONVERTERS: Final[dict[str, Callable[[str | None], str]]] = {
    "camel": camelcase,
    "pascal": pascalcase,
    "snake": snakecase,
}
