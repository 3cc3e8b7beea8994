"""Base interface for output reporters.

Reporters generate formatted output (Markdown, JSON, etc.) from a
resolved module report.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from deploy_manifest.models import ModuleReport


class BaseReporter(ABC):
    """Abstract base class for output reporters.

    Reporters take a module report and generate a formatted document.
    """

    @abstractmethod
    def render(self, report: ModuleReport) -> str:
        """Render a module report to formatted output.

        Args:
            report: Report produced by the module analyzer.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, report: ModuleReport, output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            report: Report produced by the module analyzer.
            output_path: Path to write the output file.
        """
        content = self.render(report)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format name, like "markdown" or "json"."""
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Return the default file extension, like ".md" or ".json"."""
        ...
