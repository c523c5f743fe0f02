"""
Utilities Module for Client Model Generation

This module provides file output helpers and the string case conversions
shared by the parser, the resolution engine and the templates.
"""

from .file_utils import clean_output_directory, write_files_to_disk
from .string_case import (
    CASE_CONVERTERS,
    camelcase,
    normalize_identifier,
    pascalcase,
    snakecase,
)

__all__ = [
    "CASE_CONVERTERS",
    "camelcase",
    "clean_output_directory",
    "normalize_identifier",
    "pascalcase",
    "snakecase",
    "write_files_to_disk",
]
