"""Dependency tree report for a module.

Collects the module's dependencies through the graph walker and exports
them as a flat listing (depth + path), a nested tree, or both.
"""

import logging
from pathlib import Path
from typing import Optional

from deploy_manifest.models import (
    DependencyFlatEntry,
    DependencyNode,
    DependencySummary,
    DependencyTreeFormat,
    DependencyTreeOptions,
    DependencyTreeReport,
    Manifest,
    ResolvedDependency,
)
from deploy_manifest.resolvers.context import ResolverContext
from deploy_manifest.resolvers.graph import flatten

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " -> "


def to_flat_entry(entry: ResolvedDependency) -> DependencyFlatEntry:
    declaration = entry.declaration
    return DependencyFlatEntry(
        group_id=declaration.group_id,
        artifact_id=declaration.artifact_id,
        version=entry.version or "",
        scope=entry.scope,
        type=declaration.type,
        optional=declaration.optional,
        depth=entry.depth,
        path=PATH_SEPARATOR.join(entry.path),
    )


def to_node(entry: ResolvedDependency) -> DependencyNode:
    declaration = entry.declaration
    return DependencyNode(
        group_id=declaration.group_id,
        artifact_id=declaration.artifact_id,
        version=entry.version or "",
        scope=entry.scope,
        type=declaration.type,
        optional=declaration.optional,
        children=[to_node(child) for child in entry.children],
    )


class DependencyTreeCollector:
    """Builds the dependency section of a module report."""

    def __init__(self, context: ResolverContext) -> None:
        self.context = context

    def collect(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        options: Optional[DependencyTreeOptions],
    ) -> Optional[DependencyTreeReport]:
        """Collect the dependency report of a module.

        Args:
            manifest: Root manifest of the module.
            module_dir: Directory holding the root manifest.
            options: Tree options; the report is skipped unless
                ``options.include`` is set.

        Returns:
            DependencyTreeReport, or None when disabled or when the module
            has no dependencies.
        """
        if options is None or not options.include:
            return None
        if not manifest.dependencies:
            return None

        entries = self.context.graph.walk(
            manifest,
            module_dir,
            allowed_scopes=options.normalized_scopes(),
            include_optional=options.include_optional,
            transitive=not options.exclude_transitive,
            max_depth=options.depth,
        )
        all_entries = list(flatten(entries))

        scopes: dict[str, int] = {}
        for entry in all_entries:
            scopes[entry.scope] = scopes.get(entry.scope, 0) + 1

        summary = DependencySummary(
            total=len(all_entries),
            direct=len(entries),
            transitive=len(all_entries) - len(entries),
            scopes=dict(sorted(scopes.items())),
            optional=sum(1 for e in all_entries if e.declaration.optional),
        )

        flat = None
        tree = None
        if options.format in (DependencyTreeFormat.FLAT, DependencyTreeFormat.BOTH):
            flat = [to_flat_entry(entry) for entry in all_entries]
        if options.format in (DependencyTreeFormat.TREE, DependencyTreeFormat.BOTH):
            tree = [to_node(entry) for entry in entries]

        logger.debug(
            "Dependency tree of %s: %d direct, %d transitive",
            manifest.coordinate,
            summary.direct,
            summary.transitive,
        )
        return DependencyTreeReport(summary=summary, flat=flat, tree=tree)
