"""
OpenAPI Client Model Generator

Resolves OpenAPI operations into target-language client models: type
expressions, parameter identifiers, client and method names, result and
exception types, ready for a template layer to render.
"""

from .errors import GenerationError
from .generator import ClientModelGenerator, GenerationReport, GeneratorSettings, generate_models
from .parser import OASParser, ParsedSpec

__version__ = "1.0.0"

__all__ = [
    "ClientModelGenerator",
    "GenerationError",
    "GenerationReport",
    "GeneratorSettings",
    "OASParser",
    "ParsedSpec",
    "generate_models",
]
