"""Markdown reporter for module reports.

Renders a module report (licenses, dependencies and build properties) as
Markdown through a Jinja2 template. Autoescaping is always on: every value
in the report comes from third-party manifests.
"""

from datetime import datetime
from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader, Template
from markupsafe import Markup, escape

from deploy_manifest.collectors.dependencies import PATH_SEPARATOR
from deploy_manifest.models import ModuleReport
from deploy_manifest.reporters.base import BaseReporter

DEFAULT_TEMPLATE = "report.md.j2"


def flat_path(path: str) -> Markup:
    """Escape each segment of a flat dependency path, keeping the separator."""
    return Markup(PATH_SEPARATOR).join(escape(s) for s in path.split(PATH_SEPARATOR))


def _environment(loader: Optional[BaseLoader] = None) -> Environment:
    env = Environment(
        loader=loader,
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["flat_path"] = flat_path
    return env


class MarkdownReporter(BaseReporter):
    """Reporter that generates Markdown deployment reports.

    Attributes:
        template: The compiled Jinja2 template.
    """

    def __init__(self, template_path: Optional[Path] = None) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Custom template file. Defaults to the template
                bundled in ``deploy_manifest.templates``.
        """
        if template_path is None:
            self.template = self._bundled_template()
        else:
            env = _environment(FileSystemLoader(template_path.parent))
            self.template = env.get_template(template_path.name)

    @staticmethod
    def _bundled_template() -> Template:
        source = (
            files("deploy_manifest.templates")
            .joinpath(DEFAULT_TEMPLATE)
            .read_text(encoding="utf-8")
        )
        return _environment().from_string(source)

    def render(self, report: ModuleReport) -> str:
        """Render a module report to Markdown.

        Args:
            report: Report produced by the module analyzer.

        Returns:
            The Markdown document.
        """
        return self.template.render(report=report, generated_at=datetime.now())

    @property
    def format_name(self) -> str:
        return "markdown"

    @property
    def default_extension(self) -> str:
        return ".md"
