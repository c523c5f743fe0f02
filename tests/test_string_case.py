"""Tests for the string case conversion utilities."""

import pytest

from oas_model_generator.utils.string_case import (
    CASE_CONVERTERS,
    camelcase,
    normalize_identifier,
    pascalcase,
    snakecase,
)


class TestCaseConversion:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("HelloWorld", "hello_world"),
            ("hello-world", "hello_world"),
            ("getHTTPResponse", "get_http_response"),
            ("pet.id", "pet_id"),
            ("pet__id", "pet_id"),
        ],
    )
    def test_snakecase(self, source: str, expected: str) -> None:
        assert snakecase(source) == expected

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("hello_world", "helloWorld"),
            ("Pet-Id", "petId"),
            ("getHTTPResponse", "getHttpResponse"),
            ("_id", "_id"),
        ],
    )
    def test_camelcase(self, source: str, expected: str) -> None:
        assert camelcase(source) == expected

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("hello_world", "HelloWorld"),
            ("pet store", "PetStore"),
            ("listPets", "ListPets"),
        ],
    )
    def test_pascalcase(self, source: str, expected: str) -> None:
        assert pascalcase(source) == expected

    def test_empty_and_none_inputs(self) -> None:
        assert snakecase(None) == ""
        assert camelcase("") == ""
        assert pascalcase(None) == ""

    def test_converters_are_registered_by_name(self) -> None:
        assert set(CASE_CONVERTERS) == {"camel", "pascal", "snake"}
        assert CASE_CONVERTERS["snake"]("PetId") == "pet_id"


class TestNormalizeIdentifier:
    def test_leading_digit_is_prefixed(self) -> None:
        assert normalize_identifier("123invalid") == "_123invalid"

    def test_invalid_characters_become_underscores(self) -> None:
        assert normalize_identifier("valid@name") == "valid_name"

    def test_valid_identifier_is_unchanged(self) -> None:
        assert normalize_identifier("petId") == "petId"
