#!/usr/bin/env python3
"""Command-line interface for the OpenAPI Client Model Generator."""

import argparse
import contextlib
import json
import logging
import shutil
import sys
import tempfile
import traceback
from collections.abc import Generator
from pathlib import Path

from oas_model_generator.generator.languages import TARGET_LANGUAGES
from oas_model_generator.generator.operation_model import GenerationReport, GeneratorSettings, generate_models
from oas_model_generator.generator.operation_names import OPERATION_NAME_GENERATORS
from oas_model_generator.generator.template_engine import OUTPUT_FORMATS, ClientModelGenerator
from oas_model_generator.parser.oas_parser import OASParser
from oas_model_generator.utils.file_utils import clean_output_directory, write_files_to_disk

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_JSON = 2
EXIT_GENERATION_ERROR = 3
EXIT_PARTIAL_SUCCESS = 4

DEFAULT_OPERATION_NAME_GENERATOR = "first-tag"


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Resolve an OpenAPI specification into client operation models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s spec.json
  %(prog)s spec.json --language rust --output ./models
  %(prog)s spec.json --wrap-responses --response-class "{controller}Response"
  %(prog)s spec.json --format json --verbose
        """,
    )
    parser.add_argument(
        "spec_file",
        type=Path,
        help="Path to OpenAPI specification file (JSON)",
        metavar="SPEC_FILE",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("./generated"),
        help="Output directory for generated files (default: %(default)s)",
        dest="output_dir",
    )
    parser.add_argument(
        "--language",
        "-l",
        choices=sorted(TARGET_LANGUAGES),
        default="csharp",
        help="Target language of the client models (default: %(default)s)",
    )
    parser.add_argument(
        "--generate-optional-parameters",
        action="store_true",
        help="Order required parameters before optional ones",
    )
    parser.add_argument(
        "--wrap-responses",
        action="store_true",
        help="Wrap results in the response class",
    )
    parser.add_argument(
        "--response-class",
        default="SwaggerResponse",
        help="Response wrapper class name, '{controller}' is replaced by the client name (default: %(default)s)",
    )
    parser.add_argument(
        "--class-name",
        default="{controller}Client",
        help="Client class name, '{controller}' is replaced by the client name (default: %(default)s)",
    )
    parser.add_argument(
        "--operation-name-generator",
        choices=list(OPERATION_NAME_GENERATORS),
        default=DEFAULT_OPERATION_NAME_GENERATOR,
        help="Strategy assigning client and method names (default: %(default)s)",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="markdown",
        help="Output format (default: %(default)s)",
        dest="output_format",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(args)


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def settings_from_args(parsed_args: argparse.Namespace) -> GeneratorSettings:
    """Build the immutable generator settings from parsed arguments."""
    return GeneratorSettings(
        language=parsed_args.language,
        generate_optional_parameters=parsed_args.generate_optional_parameters,
        wrap_responses=parsed_args.wrap_responses,
        response_class=parsed_args.response_class,
        operation_name_generator=OPERATION_NAME_GENERATORS[parsed_args.operation_name_generator],
        class_name=parsed_args.class_name,
    )


def print_verbose_info(*, operation_count: int, schema_count: int) -> None:
    """Print verbose information about parsed specification."""
    print(f"Parsed {operation_count} operations")
    print(f"Found {schema_count} schemas")


def print_generation_summary(*, files: dict[Path, str], report: GenerationReport, output_dir: Path) -> None:
    """Print summary of generated files and operations."""
    print(f"Built {len(report.models)} operation models in {len(report.clients)} clients")
    print(f"Generated {len(files)} files:")
    for file_path in sorted(files.keys()):
        print(f"  {file_path}")
    print(f"\nClient models generated successfully in {output_dir}")


def print_failures(report: GenerationReport) -> None:
    print(f"Warning: {len(report.failures)} operations could not be built:", file=sys.stderr)
    for failure in report.failures:
        print(f"  {failure.operation_key}: {failure.reason}", file=sys.stderr)


@contextlib.contextmanager
def backup_and_clean_output_dir(output_dir: Path) -> Generator[None, None, None]:
    """A context manager to backup and clean the output directory."""
    backup_dir = None
    if output_dir.exists() and any(output_dir.iterdir()):
        backup_dir = Path(tempfile.mkdtemp())
        shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)

    clean_output_directory(output_dir)

    try:
        yield
    except Exception:
        if backup_dir:
            print(
                "Error: Generation failed. Restoring original content.",
                file=sys.stderr,
            )
            clean_output_directory(output_dir)
            shutil.copytree(backup_dir, output_dir, dirs_exist_ok=True)
        raise
    finally:
        if backup_dir:
            shutil.rmtree(backup_dir)


def generate_client_models_from_spec(
    *,
    spec_file: Path,
    output_dir: Path,
    settings: GeneratorSettings,
    output_format: str,
    verbose: bool,
) -> tuple[dict[Path, str], GenerationReport]:
    """Parse a specification file, build its operation models and render them."""
    parser = OASParser()
    parsed_spec = parser.parse_file(spec_file)

    if verbose:
        print_verbose_info(
            operation_count=len(parsed_spec.operations),
            schema_count=len(parsed_spec.schemas),
        )

    report = generate_models(parsed_spec.operations, settings, parsed_spec.schemas)

    generator = ClientModelGenerator()
    files = generator.generate(report, settings, output_dir, output_format, title=parsed_spec.title)
    return files, report


def main(args: list[str] | None = None) -> int:
    """Generate client models from an OpenAPI specification."""
    parsed_args = parse_command_line_args(args)
    configure_logging(verbose=parsed_args.verbose)

    if not parsed_args.spec_file.exists():
        print(f"Error: Specification file not found: {parsed_args.spec_file}", file=sys.stderr)
        return EXIT_FILE_NOT_FOUND

    try:
        with backup_and_clean_output_dir(parsed_args.output_dir):
            generated_files, report = generate_client_models_from_spec(
                spec_file=parsed_args.spec_file,
                output_dir=parsed_args.output_dir,
                settings=settings_from_args(parsed_args),
                output_format=parsed_args.output_format,
                verbose=parsed_args.verbose,
            )

            # Write files to disk
            write_files_to_disk(generated_files)

            if parsed_args.verbose:
                print_generation_summary(files=generated_files, report=report, output_dir=parsed_args.output_dir)
            else:
                print(f"Client models generated successfully in {parsed_args.output_dir}")

        if report.is_partial:
            print_failures(report)
            return EXIT_PARTIAL_SUCCESS
        return EXIT_SUCCESS

    except FileNotFoundError:
        print(f"Error: Specification file not found: {parsed_args.spec_file}", file=sys.stderr)
        return EXIT_FILE_NOT_FOUND
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in specification file: {e}", file=sys.stderr)
        return EXIT_INVALID_JSON
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
