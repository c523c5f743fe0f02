"""
Client Model Generator Module

This module provides the resolution engine that turns parsed operations
into target-language client models, and the Jinja2-based rendering of
those models.
"""

from .languages import TARGET_LANGUAGES, TargetLanguage, get_target_language
from .operation_model import (
    GenerationReport,
    GeneratorSettings,
    OperationFailure,
    OperationModel,
    OperationModelBuilder,
    ParameterModel,
    generate_models,
)
from .operation_names import OPERATION_NAME_GENERATORS, OperationName, OperationNameGenerator
from .parameter_names import ParameterNameResolver
from .responses import ResponseModel, ResponseModelBuilder
from .template_engine import ClientModelGenerator, ModelTemplateEngine
from .type_resolver import TypeContext, TypeResolver

__all__ = [
    "OPERATION_NAME_GENERATORS",
    "TARGET_LANGUAGES",
    "ClientModelGenerator",
    "GenerationReport",
    "GeneratorSettings",
    "ModelTemplateEngine",
    "OperationFailure",
    "OperationModel",
    "OperationModelBuilder",
    "OperationName",
    "OperationNameGenerator",
    "ParameterModel",
    "ParameterNameResolver",
    "ResponseModel",
    "ResponseModelBuilder",
    "TargetLanguage",
    "TypeContext",
    "TypeResolver",
    "generate_models",
    "get_target_language",
]
