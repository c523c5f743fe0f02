"""Tests for target language records and the reserved word tables."""

import pytest

from oas_model_generator.errors import UnknownLanguageError
from oas_model_generator.generator.languages import (
    CSHARP,
    RUST,
    TargetLanguage,
    get_target_language,
)


class TestReservedWords:
    @pytest.mark.parametrize("word", ["class", "namespace", "default", "object"])
    def test_csharp_reserved_word_gets_verbatim_prefix(self, csharp: TargetLanguage, word: str) -> None:
        assert csharp.escape_identifier(word) == f"@{word}"

    @pytest.mark.parametrize("identifier", ["id", "classes", "Class", "petId"])
    def test_non_reserved_identifier_is_never_escaped(self, csharp: TargetLanguage, identifier: str) -> None:
        assert csharp.escape_identifier(identifier) == identifier

    def test_rust_reserved_word_becomes_raw_identifier(self, rust: TargetLanguage) -> None:
        assert rust.escape_identifier("type") == "r#type"
        assert rust.escape_identifier("async") == "r#async"

    @pytest.mark.parametrize("word", ["self", "Self", "super", "crate"])
    def test_rust_words_without_raw_form_use_fallback_prefix(self, rust: TargetLanguage, word: str) -> None:
        assert rust.escape_identifier(word) == f"_{word}"


class TestTypeComposition:
    def test_csharp_containers(self, csharp: TargetLanguage) -> None:
        assert csharp.sequence_of("Pet") == "System.Collections.Generic.IEnumerable<Pet>"
        assert csharp.dictionary_of("int") == "System.Collections.Generic.IDictionary<string, int>"

    def test_csharp_nullable_only_wraps_value_types(self, csharp: TargetLanguage) -> None:
        assert csharp.nullable_of("int") == "int?"
        assert csharp.nullable_of("string") == "string"
        assert csharp.nullable_of("Pet") == "Pet"

    def test_rust_nullable_wraps_everything_but_void(self, rust: TargetLanguage) -> None:
        assert rust.nullable_of("String") == "Option<String>"
        assert rust.nullable_of("Pet") == "Option<Pet>"
        assert rust.nullable_of("()") == "()"

    def test_async_of_void_uses_non_generic_type(self, csharp: TargetLanguage, rust: TargetLanguage) -> None:
        assert csharp.async_of("void") == "System.Threading.Tasks.Task"
        assert csharp.async_of("Pet") == "System.Threading.Tasks.Task<Pet>"
        assert rust.async_of("()") == "impl std::future::Future<Output = ()>"
        assert rust.async_of("Pet") == "impl std::future::Future<Output = Pet>"

    def test_generic_of(self) -> None:
        assert TargetLanguage.generic_of("PetsResponse", "Pet") == "PetsResponse<Pet>"


class TestPrimitiveTypes:
    @pytest.mark.parametrize(
        ("type_name", "schema_format", "expected"),
        [
            ("string", None, "string"),
            ("string", "date-time", "System.DateTimeOffset"),
            ("integer", "int64", "long"),
            ("integer", "int99", "int"),
            ("number", "float", "float"),
            ("boolean", None, "bool"),
        ],
    )
    def test_csharp_primitive_mapping(
        self, csharp: TargetLanguage, type_name: str, schema_format: str | None, expected: str
    ) -> None:
        assert csharp.primitive_type(type_name, schema_format) == expected

    def test_unknown_primitive_has_no_mapping(self, rust: TargetLanguage) -> None:
        assert rust.primitive_type("object", None) is None


class TestLanguageSelection:
    def test_lookup_is_case_insensitive(self) -> None:
        assert get_target_language("CSharp") is CSHARP
        assert get_target_language("rust") is RUST

    def test_unknown_tag_raises(self) -> None:
        with pytest.raises(UnknownLanguageError, match="csharp, rust") as exc_info:
            get_target_language("cobol")
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.tag == "cobol"

    def test_identifier_casing_follows_language(self, csharp: TargetLanguage, rust: TargetLanguage) -> None:
        assert csharp.variable_name("pet_id") == "petId"
        assert rust.variable_name("petId") == "pet_id"
        assert csharp.method_name("list_pets") == "ListPets"
        assert rust.method_name("ListPets") == "list_pets"
