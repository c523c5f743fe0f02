"""
Template Engine for Client Model Manifests

This module uses Jinja2 templates to render the operation models of a
generation pass as a reviewable manifest, or dumps them as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, select_autoescape

from oas_model_generator.generator.filters import FILTERS
from oas_model_generator.generator.operation_model import GenerationReport, GeneratorSettings, OperationModel

MANIFEST_TEMPLATE: Final = "client_models.md.j2"
OUTPUT_FORMATS: Final = ("markdown", "json")


class ModelTemplateEngine:
    """Template engine for rendering client model manifests."""

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template engine."""
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        self.env.filters.update(FILTERS)

    def _register_globals(self) -> None:
        self.env.globals.update(
            {
                "interface_name": lambda class_name: f"I{class_name}",
            }
        )

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        template = self.env.get_template(template_name)
        return template.render(**context)


class ClientModelGenerator:
    """Renders the outcome of a generation pass to output files."""

    def __init__(self, template_engine: ModelTemplateEngine | None = None) -> None:
        self.template_engine = template_engine or ModelTemplateEngine()

    def generate(
        self,
        report: GenerationReport,
        settings: GeneratorSettings,
        output_dir: Path,
        fmt: str = "markdown",
        title: str = "API",
    ) -> dict[Path, str]:
        """Render a generation report.

        Args:
            report: The models and failures of a generation pass.
            settings: The settings the pass ran with.
            output_dir: Directory the returned paths are rooted at.
            fmt: ``"markdown"`` for the manifest, ``"json"`` for a raw dump.
            title: Title of the API, shown in the manifest heading.

        Returns:
            Mapping of output path to file content.

        Raises:
            ValueError: If ``fmt`` is not a known output format.
        """
        output_dir = Path(output_dir)
        if fmt == "json":
            return {output_dir / "clients.json": self._render_json(report, settings, title)}
        if fmt != "markdown":
            msg = f"Unknown output format '{fmt}' (expected one of: {', '.join(OUTPUT_FORMATS)})"
            raise ValueError(msg)

        context = {
            "title": title,
            "settings": settings,
            "language": settings.target_language,
            "clients": self._client_groups(report),
            "named_types": dict(sorted(report.named_types.items())),
            "failures": report.failures,
        }
        return {output_dir / "clients.md": self.template_engine.render_template(MANIFEST_TEMPLATE, context)}

    @staticmethod
    def _client_groups(report: GenerationReport) -> list[tuple[str, list[OperationModel]]]:
        """Client groups ordered by class name, operations in declaration order."""
        groups = report.clients
        return sorted(
            ((models[0].client_class_name, models) for models in groups.values()),
            key=lambda group: group[0],
        )

    @staticmethod
    def _render_json(report: GenerationReport, settings: GeneratorSettings, title: str) -> str:
        document = {
            "title": title,
            "language": settings.target_language.name,
            **report.to_dict(),
        }
        return json.dumps(document, indent=2, default=str) + "\n"
