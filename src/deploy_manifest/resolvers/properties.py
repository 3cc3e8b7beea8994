"""Property table construction and ``${...}`` placeholder substitution."""

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from deploy_manifest.models import Manifest

if TYPE_CHECKING:
    from deploy_manifest.resolvers.context import ResolverContext

logger = logging.getLogger(__name__)

MAX_SUBSTITUTION_PASSES = 10

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^${}]+)\}")


def substitute(text: Optional[str], table: Mapping[str, str]) -> Optional[str]:
    """Replace known ``${name}`` placeholders in text.

    Runs up to ten passes so that property values which themselves contain
    placeholders get expanded. Unknown placeholders are left untouched.

    Args:
        text: Text to expand. None is returned unchanged.
        table: Property lookup.

    Returns:
        The expanded text.
    """
    if not text or "${" not in text:
        return text

    def replace(match: re.Match) -> str:
        value = table.get(match.group(1).strip())
        return match.group(0) if value is None else value

    for _ in range(MAX_SUBSTITUTION_PASSES):
        expanded = PLACEHOLDER_PATTERN.sub(replace, text)
        if expanded == text:
            break
        text = expanded
    return text


def has_placeholder(text: Optional[str]) -> bool:
    """Return True if text still contains a ``${...}`` placeholder."""
    return bool(text) and PLACEHOLDER_PATTERN.search(text) is not None


def identity_properties(manifest: Manifest) -> dict[str, str]:
    """Return the built-in identity properties of a manifest.

    Both the ``project.*`` and the legacy ``pom.*`` spellings are provided,
    plus the parent's coordinates when a parent is declared.
    """
    coordinate = manifest.coordinate
    identity = {
        "project.groupId": coordinate.group_id,
        "project.artifactId": coordinate.artifact_id,
        "project.version": coordinate.version,
        "pom.groupId": coordinate.group_id,
        "pom.artifactId": coordinate.artifact_id,
        "pom.version": coordinate.version,
    }
    if manifest.parent:
        identity["project.parent.groupId"] = manifest.parent.group_id
        identity["project.parent.version"] = manifest.parent.version
    return {key: value for key, value in identity.items() if value}


class PropertyResolver:
    """Builds effective property tables for manifests.

    All merges are first-write-wins: a value already present in the table
    is never replaced, so a child's properties shadow its ancestors' as long
    as the child is merged first.
    """

    def __init__(self, context: "ResolverContext") -> None:
        self.context = context

    def resolve(
        self,
        manifest: Manifest,
        ancestor_properties: Optional[Mapping[str, str]] = None,
    ) -> dict[str, str]:
        """Build the property table of a single manifest.

        Args:
            manifest: Manifest whose properties are merged.
            ancestor_properties: Caller-supplied values; they are kept as-is.

        Returns:
            New table: caller values, then identity aliases, then the
            manifest's declared properties.
        """
        table = dict(ancestor_properties or {})
        for key, value in identity_properties(manifest).items():
            table.setdefault(key, value)
        for key, value in manifest.properties.items():
            table.setdefault(key, value)
        return table

    def effective(self, manifest: Manifest, module_dir: Optional[Path]) -> dict[str, str]:
        """Return the manifest's properties merged with its ancestors'.

        Args:
            manifest: Manifest to resolve.
            module_dir: Directory of the manifest, used for parent discovery.

        Returns:
            A fresh copy of the effective table; callers may mutate it.
        """
        key = self.context.memo_key(manifest)
        cached = self.context.property_tables.get(key)
        if cached is None:
            cached = self.resolve(manifest)
            for parent, _ in self.context.parents.iter_ancestors(manifest, module_dir):
                merge_properties(cached, parent.properties)
            self.context.property_tables[key] = cached
        return dict(cached)

    @staticmethod
    def substitute(text: Optional[str], table: Mapping[str, str]) -> Optional[str]:
        return substitute(text, table)


def merge_properties(target: dict[str, str], source: Mapping[str, str]) -> None:
    """Merge source into target without overwriting existing keys."""
    for key, value in source.items():
        target.setdefault(key, value)
