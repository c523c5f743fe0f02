"""
File utilities for the model generator.

This module provides the output-side file operations used by the command
line interface when writing rendered model manifests.
"""

import shutil
from pathlib import Path


def write_files_to_disk(files: dict[Path, str]) -> None:
    """Write rendered files to disk.

    Args:
        files: Dictionary mapping file paths to their content.
    """
    for path, content in files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def clean_output_directory(output_dir: Path) -> None:
    """Remove every file below the output directory and recreate it empty.

    Args:
        output_dir: Path to the output directory to clean.
    """
    shutil.rmtree(output_dir, ignore_errors=True)
    output_dir.mkdir(parents=True, exist_ok=True)
