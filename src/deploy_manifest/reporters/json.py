"""JSON reporter for module reports."""

import json
from dataclasses import asdict
from typing import Any

from deploy_manifest.models import ModuleReport
from deploy_manifest.reporters.base import BaseReporter


def _drop_none(value: Any) -> Any:
    """Recursively remove None-valued keys from dictionaries."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value


class JsonReporter(BaseReporter):
    """Reporter that serializes the report dataclasses to JSON.

    Attributes:
        indent: Indentation passed to :func:`json.dumps`.
    """

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, report: ModuleReport) -> str:
        data = _drop_none(asdict(report))
        data["coordinate"] = report.coordinate.key
        return json.dumps(data, indent=self.indent, default=str) + "\n"

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def default_extension(self) -> str:
        return ".json"
