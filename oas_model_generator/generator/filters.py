"""
Jinja2 filters for rendering client model manifests.

The manifest prints what the resolution engine decided (signatures,
result and exception types, response tables) without adding any
target-language syntax of its own.
"""

from __future__ import annotations

import json
from typing import Any

from oas_model_generator.generator.operation_model import OperationModel, ParameterModel
from oas_model_generator.parser.oas_parser import SchemaNode

_DOC_PREFIX = "> "


def doc_comment(text: str | None, prefix: str = _DOC_PREFIX) -> str:
    """Format a description as a markdown block quote.

    Blank lines stay inside the quote so that multi-paragraph descriptions
    render as one block.

    Args:
        text: The description to format.
        prefix: Prefix of every output line.

    Returns:
        The quoted text, or an empty string for an empty description.
    """
    if not text:
        return ""

    result: list[str] = []
    for line in text.strip().split("\n"):
        stripped_line = line.strip()
        result.append(f"{prefix}{stripped_line}" if stripped_line else prefix.rstrip())
    return "\n".join(result)


def string_literal(value: Any) -> str:
    """Render a default value as a JSON literal."""
    return json.dumps(value, default=str)


def parameter_declaration(parameter: ParameterModel) -> str:
    """``name: type``, with ``= default`` for optional parameters."""
    declaration = f"{parameter.variable_name}: {parameter.type}"
    if parameter.is_optional:
        default = "null" if parameter.default is None else string_literal(parameter.default)
        declaration += f" = {default}"
    return declaration


def signature(model: OperationModel) -> str:
    """Language-neutral signature line of an operation model.

    Example:
        ``GetPetById(petId: long) -> System.Threading.Tasks.Task<Pet>``
    """
    parameters = ", ".join(parameter_declaration(parameter) for parameter in model.parameters)
    return f"{model.method_name}({parameters}) -> {model.result_type}"


def markdown_cell(text: Any) -> str:
    """Escape a value for use inside a markdown table cell."""
    if text is None:
        return ""
    return str(text).replace("|", "\\|").replace("\n", " ").strip()


def schema_kind(schema: SchemaNode) -> str:
    """Kind of a generated type definition."""
    actual = schema.actual_schema
    return "enum" if actual.is_enum else "object"


# Register filters that will be available in Jinja templates
FILTERS = {
    "doc_comment": doc_comment,
    "string_literal": string_literal,
    "parameter_declaration": parameter_declaration,
    "signature": signature,
    "markdown_cell": markdown_cell,
    "schema_kind": schema_kind,
}
