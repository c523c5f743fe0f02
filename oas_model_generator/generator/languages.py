"""
Target language records for client model generation.

Each backend is one immutable ``TargetLanguage`` value: its reserved words,
the identifier escape convention, the container and wrapper type names,
and the primitive type mapping. The resolution algorithm is shared; only
these records differ between languages.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from oas_model_generator.errors import UnknownLanguageError
from oas_model_generator.utils.string_case import CASE_CONVERTERS

CSHARP_RESERVED_WORDS: Final = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char", "checked", "class",
        "const", "continue", "decimal", "default", "delegate", "do", "double", "else", "enum", "event",
        "explicit", "extern", "false", "finally", "fixed", "float", "for", "foreach", "goto", "if",
        "implicit", "in", "int", "interface", "internal", "is", "lock", "long", "namespace", "new", "null",
        "object", "operator", "out", "override", "params", "private", "protected", "public", "readonly",
        "ref", "return", "sbyte", "sealed", "short", "sizeof", "stackalloc", "static", "string", "struct",
        "switch", "this", "throw", "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)  # fmt: skip

RUST_RESERVED_WORDS: Final = frozenset(
    {
        # Strict keywords
        "as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn", "for",
        "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type", "unsafe", "use", "where",
        "while",
        # Weak keywords
        "async", "await", "dyn", "union", "try",
        # Reserved for future use
        "abstract", "become", "box", "do", "final", "macro", "override", "priv", "typeof", "unsized",
        "virtual", "yield",
    }
)  # fmt: skip

# Keywords that cannot be written as raw identifiers (r#self is rejected by rustc)
RUST_NON_RAW_WORDS: Final = frozenset({"self", "Self", "super", "crate"})


@dataclass(frozen=True)
class TargetLanguage:
    """Everything that varies between target languages.

    Container, wrapper and nullable fields are format strings with a single
    ``{}`` placeholder.
    """

    name: str
    reserved_words: frozenset[str]
    escape_prefix: str
    sequence_type: str
    dictionary_type: str
    file_parameter_type: str
    file_sequence_type: str
    file_response_type: str
    async_type: str
    async_void_type: str
    void_type: str
    any_type: str
    generic_exception_type: str
    primitive_types: Mapping[str, Mapping[str | None, str]]
    nullable_type: str
    value_types: frozenset[str] = frozenset()
    nullable_wraps_references: bool = False
    exception_fallback_type: str = "Exception"
    fallback_escape_prefix: str = "_"
    unescapable_words: frozenset[str] = frozenset()
    variable_case: str = "camel"
    method_case: str = "pascal"
    type_case: str = "pascal"

    def is_reserved(self, identifier: str) -> bool:
        return identifier in self.reserved_words

    def escape_identifier(self, identifier: str) -> str:
        """Prefix a reserved identifier; any other identifier is returned unchanged."""
        if not self.is_reserved(identifier):
            return identifier
        if identifier in self.unescapable_words:
            return f"{self.fallback_escape_prefix}{identifier}"
        return f"{self.escape_prefix}{identifier}"

    def sequence_of(self, item_type: str) -> str:
        return self.sequence_type.format(item_type)

    def dictionary_of(self, value_type: str) -> str:
        return self.dictionary_type.format(value_type)

    def nullable_of(self, type_name: str) -> str:
        """Mark a type nullable where the language needs it spelled out."""
        if type_name == self.void_type:
            return type_name
        if self.nullable_wraps_references or type_name in self.value_types:
            return self.nullable_type.format(type_name)
        return type_name

    def async_of(self, result_type: str) -> str:
        if result_type == self.void_type:
            return self.async_void_type
        return self.async_type.format(result_type)

    @staticmethod
    def generic_of(wrapper_type: str, argument_type: str) -> str:
        return f"{wrapper_type}<{argument_type}>"

    def primitive_type(self, type_name: str, schema_format: str | None) -> str | None:
        """Look up a primitive mapping, falling back to the format-less entry."""
        formats = self.primitive_types.get(type_name)
        if formats is None:
            return None
        return formats.get(schema_format, formats.get(None))

    def variable_name(self, name: str) -> str:
        return CASE_CONVERTERS[self.variable_case](name)

    def method_name(self, name: str) -> str:
        return CASE_CONVERTERS[self.method_case](name)

    def type_name(self, name: str) -> str:
        return CASE_CONVERTERS[self.type_case](name)


CSHARP: Final = TargetLanguage(
    name="csharp",
    reserved_words=CSHARP_RESERVED_WORDS,
    escape_prefix="@",
    sequence_type="System.Collections.Generic.IEnumerable<{}>",
    dictionary_type="System.Collections.Generic.IDictionary<string, {}>",
    file_parameter_type="FileParameter",
    file_sequence_type="System.Collections.Generic.IEnumerable<FileParameter>",
    file_response_type="FileResponse",
    async_type="System.Threading.Tasks.Task<{}>",
    async_void_type="System.Threading.Tasks.Task",
    void_type="void",
    any_type="object",
    generic_exception_type="System.Exception",
    primitive_types={
        "string": {
            None: "string",
            "date": "System.DateTimeOffset",
            "date-time": "System.DateTimeOffset",
            "time": "System.TimeSpan",
            "duration": "System.TimeSpan",
            "uuid": "System.Guid",
            "guid": "System.Guid",
            "byte": "byte[]",
            "uri": "System.Uri",
        },
        "integer": {
            None: "int",
            "int32": "int",
            "int64": "long",
        },
        "number": {
            None: "double",
            "float": "float",
            "double": "double",
            "decimal": "decimal",
        },
        "boolean": {
            None: "bool",
        },
    },
    nullable_type="{}?",
    value_types=frozenset(
        {
            "int",
            "long",
            "float",
            "double",
            "decimal",
            "bool",
            "System.DateTimeOffset",
            "System.TimeSpan",
            "System.Guid",
        }
    ),
    variable_case="camel",
    method_case="pascal",
)

RUST: Final = TargetLanguage(
    name="rust",
    reserved_words=RUST_RESERVED_WORDS,
    escape_prefix="r#",
    unescapable_words=RUST_NON_RAW_WORDS,
    sequence_type="Vec<{}>",
    dictionary_type="std::collections::HashMap<String, {}>",
    file_parameter_type="FileParameter",
    file_sequence_type="Vec<FileParameter>",
    file_response_type="FileResponse",
    async_type="impl std::future::Future<Output = {}>",
    async_void_type="impl std::future::Future<Output = ()>",
    void_type="()",
    any_type="serde_json::Value",
    generic_exception_type="Box<dyn std::error::Error>",
    primitive_types={
        "string": {
            None: "String",
            "byte": "Vec<u8>",
        },
        "integer": {
            None: "i64",
            "int32": "i32",
            "int64": "i64",
            "uint64": "u64",
        },
        "number": {
            None: "f64",
            "float": "f32",
            "double": "f64",
        },
        "boolean": {
            None: "bool",
        },
    },
    nullable_type="Option<{}>",
    nullable_wraps_references=True,
    variable_case="snake",
    method_case="snake",
)

TARGET_LANGUAGES: Final[dict[str, TargetLanguage]] = {
    CSHARP.name: CSHARP,
    RUST.name: RUST,
}


def get_target_language(tag: str) -> TargetLanguage:
    """Select the language record for a target-language tag.

    Args:
        tag: Language tag such as ``"csharp"`` or ``"rust"`` (case-insensitive).

    Returns:
        The matching language record.

    Raises:
        UnknownLanguageError: If no backend is registered for the tag.
    """
    try:
        return TARGET_LANGUAGES[tag.lower()]
    except KeyError:
        raise UnknownLanguageError(tag, sorted(TARGET_LANGUAGES)) from None
