"""Output reporters for module reports.

This module provides reporters for rendering a module report to
Markdown or JSON.
"""

from deploy_manifest.reporters.base import BaseReporter
from deploy_manifest.reporters.json import JsonReporter
from deploy_manifest.reporters.markdown import MarkdownReporter

__all__ = ["BaseReporter", "JsonReporter", "MarkdownReporter", "get_reporter"]


def get_reporter(format_name: str) -> BaseReporter:
    """Return a reporter for the given format name.

    Raises:
        ValueError: If the format is not supported.
    """
    reporters: dict[str, type[BaseReporter]] = {
        "markdown": MarkdownReporter,
        "md": MarkdownReporter,
        "json": JsonReporter,
    }
    try:
        return reporters[format_name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unsupported format '{format_name}'. Supported: markdown, json"
        ) from None
