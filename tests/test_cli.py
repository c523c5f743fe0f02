"""Tests for the command line interface and its exit codes."""

import json
from pathlib import Path
from typing import Any

import pytest

from oas_model_generator.cli import (
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERATION_ERROR,
    EXIT_INVALID_JSON,
    EXIT_PARTIAL_SUCCESS,
    EXIT_SUCCESS,
    main,
    parse_command_line_args,
    settings_from_args,
)
from oas_model_generator.generator.operation_names import PATH_SEGMENTS

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {"title": "Petstore"},
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "tags": ["pets"],
                "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {
                            "application/json": {
                                "schema": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
                            },
                        },
                    },
                },
            },
        },
    },
    "components": {"schemas": {"Pet": {"type": "object", "properties": {"name": {"type": "string"}}}}},
}


@pytest.fixture
def spec_file(tmp_path: Path) -> Path:
    path = tmp_path / "petstore.json"
    path.write_text(json.dumps(PETSTORE), encoding="utf-8")
    return path


class TestArguments:
    def test_defaults(self, spec_file: Path) -> None:
        parsed_args = parse_command_line_args([str(spec_file)])
        settings = settings_from_args(parsed_args)

        assert parsed_args.output_format == "markdown"
        assert settings.language == "csharp"
        assert not settings.generate_optional_parameters
        assert settings.response_class == "SwaggerResponse"

    def test_options_build_settings(self, spec_file: Path) -> None:
        parsed_args = parse_command_line_args(
            [
                str(spec_file),
                "--language",
                "rust",
                "--wrap-responses",
                "--response-class",
                "{controller}Response",
                "--operation-name-generator",
                "path-segments",
                "--generate-optional-parameters",
            ]
        )
        settings = settings_from_args(parsed_args)

        assert settings.language == "rust"
        assert settings.wrap_responses
        assert settings.generate_optional_parameters
        assert settings.response_class_name("Pets") == "PetsResponse"
        assert settings.operation_name_generator is PATH_SEGMENTS

    def test_unknown_language_is_rejected(self, spec_file: Path) -> None:
        with pytest.raises(SystemExit):
            parse_command_line_args([str(spec_file), "--language", "cobol"])


class TestMain:
    def test_success_writes_manifest(self, spec_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        output_dir = tmp_path / "out"

        assert main([str(spec_file), "--output", str(output_dir)]) == EXIT_SUCCESS

        content = (output_dir / "clients.md").read_text(encoding="utf-8")
        assert "ListPets(limit: int? = null)" in content
        assert "-> System.Threading.Tasks.Task<System.Collections.Generic.IEnumerable<Pet>>" in content
        assert "generated successfully" in capsys.readouterr().out

    def test_json_output(self, spec_file: Path, tmp_path: Path) -> None:
        output_dir = tmp_path / "out"

        assert main([str(spec_file), "-o", str(output_dir), "--format", "json", "-l", "rust"]) == EXIT_SUCCESS

        document = json.loads((output_dir / "clients.json").read_text(encoding="utf-8"))
        assert document["models"][0]["method_name"] == "list_pets"
        assert document["models"][0]["unwrapped_result_type"] == "Vec<Pet>"

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.json"), "-o", str(tmp_path / "out")]) == EXIT_FILE_NOT_FOUND

    def test_invalid_json(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "broken.json"
        spec_file.write_text("{not json", encoding="utf-8")
        assert main([str(spec_file), "-o", str(tmp_path / "out")]) == EXIT_INVALID_JSON

    def test_empty_document_is_a_generation_error(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "empty.json"
        spec_file.write_text("{}", encoding="utf-8")
        assert main([str(spec_file), "-o", str(tmp_path / "out")]) == EXIT_GENERATION_ERROR

    def test_partial_success(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        spec = json.loads(json.dumps(PETSTORE))
        spec["paths"]["/broken"] = {"get": {"operationId": "broken", "responses": {"ok": {}}}}
        spec_file = tmp_path / "partial.json"
        spec_file.write_text(json.dumps(spec), encoding="utf-8")
        output_dir = tmp_path / "out"

        assert main([str(spec_file), "-o", str(output_dir)]) == EXIT_PARTIAL_SUCCESS

        assert (output_dir / "clients.md").exists()
        assert "GET /broken" in capsys.readouterr().err

    def test_failed_generation_restores_previous_output(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "keep.md").write_text("previous", encoding="utf-8")
        spec_file = tmp_path / "empty.json"
        spec_file.write_text("{}", encoding="utf-8")

        assert main([str(spec_file), "-o", str(output_dir)]) == EXIT_GENERATION_ERROR
        assert (output_dir / "keep.md").read_text(encoding="utf-8") == "previous"
