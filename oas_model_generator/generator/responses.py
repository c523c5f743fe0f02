"""
Response classification for operation models.

Splits an operation's declared responses into success and error sets,
builds one ``ResponseModel`` per status code, picks the primary success
response and derives the operation's exception type.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final, NamedTuple

from oas_model_generator.errors import InvalidOperationError
from oas_model_generator.generator.languages import TargetLanguage
from oas_model_generator.generator.type_resolver import TypeContext, TypeResolver
from oas_model_generator.parser.oas_parser import Operation, Response

logger = logging.getLogger(__name__)

DEFAULT_STATUS_CODE: Final = "default"

_STATUS_CODE_PATTERN: Final = re.compile(r"^(default|[1-5]\d\d|[1-5]XX)$", re.IGNORECASE)


def is_success_status_code(status_code: str) -> bool:
    """Check if status code is in the 2xx range (explicit or the ``2XX`` wildcard)."""
    return len(status_code) == 3 and status_code[0] == "2" and (
        status_code[1:].isdigit() or status_code[1:].upper() == "XX"
    )


def _specificity(status_code: str) -> tuple[int, int]:
    """Sort key: explicit numeric codes first (lowest wins), then ranges, then default."""
    if status_code.isdigit():
        return (0, int(status_code))
    if status_code.lower() == DEFAULT_STATUS_CODE:
        return (2, 0)
    return (1, 0)


@dataclass(frozen=True)
class ResponseModel:
    """Resolved view of one declared response."""

    status_code: str
    type: str
    is_success: bool
    is_primary: bool
    is_nullable: bool
    is_file: bool
    void_type: str
    description: str = ""

    @property
    def has_type(self) -> bool:
        return self.type != self.void_type


class ResponseSet(NamedTuple):
    responses: tuple[ResponseModel, ...]
    primary: ResponseModel | None


class ResponseModelBuilder:
    """Builds response models and the exception type of an operation."""

    def __init__(self, language: TargetLanguage, type_resolver: TypeResolver) -> None:
        self.language = language
        self.type_resolver = type_resolver

    def build(self, operation: Operation) -> ResponseSet:
        """Build one response model per status code and choose the primary one.

        Raises:
            InvalidOperationError: If the status code map is missing or malformed.
        """
        responses = self._validated_responses(operation)
        success_codes = self._success_codes(responses)
        primary_code = min(success_codes, key=_specificity) if success_codes else None

        models = []
        for status_code, response in responses.items():
            is_success = status_code in success_codes
            response_type = self.type_resolver.resolve(
                response.schema,
                TypeContext(
                    nullable=response.nullable,
                    fallback_name="Response" if is_success else "Exception",
                    is_response=True,
                ),
            )
            models.append(
                ResponseModel(
                    status_code=status_code,
                    type=response_type,
                    is_success=is_success,
                    is_primary=status_code == primary_code,
                    is_nullable=response.nullable or (response.schema is not None and response.schema.is_nullable),
                    is_file=response_type == self.language.file_response_type,
                    void_type=self.language.void_type,
                    description=response.description,
                )
            )

        primary = next((model for model in models if model.is_primary), None)
        return ResponseSet(responses=tuple(models), primary=primary)

    def exception_type(self, operation: Operation) -> str:
        """Resolve the exception type of an operation.

        Zero or several error responses give the generic exception type;
        exactly one gives that response's resolved schema type.
        """
        responses = self._validated_responses(operation)
        success_codes = self._success_codes(responses)
        errors = [response for status_code, response in responses.items() if status_code not in success_codes]

        if len(errors) != 1:
            if errors:
                logger.info(
                    "%s declares %d error responses; using %s",
                    operation.key,
                    len(errors),
                    self.language.generic_exception_type,
                )
            return self.language.generic_exception_type

        error = errors[0]
        if error.schema is None or error.schema.is_empty:
            return self.language.exception_fallback_type
        context = TypeContext(nullable=error.nullable, fallback_name="Exception", is_response=True)
        return self.type_resolver.resolve(error.schema, context)

    @staticmethod
    def _success_codes(responses: dict[str, Response]) -> set[str]:
        success = {status_code for status_code in responses if is_success_status_code(status_code)}
        if not success:
            success = {status_code for status_code in responses if status_code.lower() == DEFAULT_STATUS_CODE}
        return success

    @staticmethod
    def _validated_responses(operation: Operation) -> dict[str, Response]:
        responses = operation.responses
        if not isinstance(responses, dict):
            raise InvalidOperationError(operation.key, "operation has no response map")

        for status_code, response in responses.items():
            if not isinstance(status_code, str) or not _STATUS_CODE_PATTERN.match(status_code):
                raise InvalidOperationError(operation.key, f"malformed status code {status_code!r}")
            if not isinstance(response, Response):
                raise InvalidOperationError(operation.key, f"response {status_code} is not a response object")
        return responses
