"""Depth-first traversal of a manifest's dependency graph."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from deploy_manifest.models import (
    DependencyDeclaration,
    Manifest,
    ResolvedDependency,
)
from deploy_manifest.resolvers.properties import substitute

if TYPE_CHECKING:
    from deploy_manifest.resolvers.context import ResolverContext

logger = logging.getLogger(__name__)


def path_segment(declaration: DependencyDeclaration, version: Optional[str]) -> str:
    """Return the ``group:artifact:type:version`` segment of a flat path."""
    return ":".join(
        [
            declaration.group_id,
            declaration.artifact_id,
            declaration.type or "jar",
            version or "",
        ]
    )


def flatten(entries: list[ResolvedDependency]) -> Iterator[ResolvedDependency]:
    """Yield entries and their descendants in pre-order (traversal order)."""
    for entry in entries:
        yield entry
        yield from flatten(entry.children)


class _Walk:
    """Parameters and visited set of one :meth:`DependencyGraphWalker.walk`."""

    def __init__(
        self,
        allowed_scopes: set[str],
        include_optional: bool,
        transitive: bool,
        max_depth: int,
    ) -> None:
        self.allowed_scopes = allowed_scopes
        self.include_optional = include_optional
        self.transitive = transitive
        self.max_depth = max_depth
        self.visited: set[str] = set()

    def may_descend(self, depth: int) -> bool:
        return self.transitive and (self.max_depth < 0 or depth < self.max_depth)


class DependencyGraphWalker:
    """Walks direct and transitive dependencies, each coordinate at most once.

    Every coordinate is added to the visited set before its subtree is
    explored, so diamonds and cycles terminate and each coordinate is
    reported at the depth where the depth-first walk first reaches it.
    """

    def __init__(self, context: "ResolverContext") -> None:
        self.context = context

    def walk(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        allowed_scopes: set[str],
        include_optional: bool = False,
        transitive: bool = True,
        max_depth: int = -1,
    ) -> list[ResolvedDependency]:
        """Traverse the dependency graph of a manifest.

        Args:
            manifest: Root manifest.
            module_dir: Directory holding the root manifest.
            allowed_scopes: Normalized scopes to keep.
            include_optional: Keep optional dependencies.
            transitive: Descend into dependencies' own manifests.
            max_depth: Deepest level to report; -1 means unlimited.

        Returns:
            Direct dependencies (depth 1), each carrying the transitive
            dependencies first reached through it as children.
        """
        state = _Walk(allowed_scopes, include_optional, transitive, max_depth)
        # The root module is never its own dependency
        state.visited.add(manifest.coordinate.key)
        entries = self._visit(manifest, module_dir, 1, [], state)
        logger.debug(
            "Walked %d dependencies of %s", len(state.visited) - 1, manifest.coordinate
        )
        return entries

    def _visit(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        depth: int,
        path: list[str],
        state: _Walk,
    ) -> list[ResolvedDependency]:
        entries: list[ResolvedDependency] = []
        for declaration in manifest.dependencies:
            scope = declaration.normalized_scope
            if scope not in state.allowed_scopes:
                continue
            if declaration.optional and not state.include_optional:
                continue

            resolved = self._resolve_declaration(declaration, manifest, module_dir)
            if not resolved.group_id or not resolved.artifact_id:
                logger.debug("Skipping incomplete dependency in %s", manifest.coordinate)
                continue

            version = self.context.versions.resolve_version(
                declaration, manifest, module_dir
            )
            entry = ResolvedDependency(
                declaration=resolved,
                version=version,
                depth=depth,
                path=path + [path_segment(resolved, version)],
            )
            key = entry.coordinate.key
            if key in state.visited:
                logger.debug("Already visited %s, skipping", key)
                continue
            state.visited.add(key)
            entries.append(entry)

            if not state.may_descend(depth):
                continue
            child_manifest = self.context.load(entry.coordinate)
            if child_manifest is None:
                continue
            entry.children = self._visit(
                child_manifest, child_manifest.module_dir, depth + 1, entry.path, state
            )
        return entries

    def _resolve_declaration(
        self,
        declaration: DependencyDeclaration,
        manifest: Manifest,
        module_dir: Optional[Path],
    ) -> DependencyDeclaration:
        """Expand placeholders in a declaration's group and artifact."""
        if "${" not in declaration.group_id and "${" not in declaration.artifact_id:
            return declaration
        properties = self.context.properties.effective(manifest, module_dir)
        return DependencyDeclaration(
            group_id=substitute(declaration.group_id, properties) or "",
            artifact_id=substitute(declaration.artifact_id, properties) or "",
            version=declaration.version,
            scope=declaration.scope,
            type=declaration.type,
            optional=declaration.optional,
        )
