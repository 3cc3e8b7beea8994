"""Managed dependency version resolution.

Versions omitted on a dependency are looked up in the effective
``<dependencyManagement>`` of the declaring manifest. That table is built
from the manifest's own entries, the bill-of-materials manifests it imports,
and the same again for every ancestor.

Precedence is first-write-wins in this order:

1. the manifest's own (non-import) managed entries,
2. its imported BOMs, in declaration order (recursively),
3. each ancestor, nearest first, with the same two steps.

So a version declared by the module itself always beats a BOM-imported one,
whatever the order of the declarations.
"""

import logging
from collections import ChainMap
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from deploy_manifest.models import Coordinate, DependencyDeclaration, Manifest
from deploy_manifest.resolvers.properties import (
    has_placeholder,
    merge_properties,
    substitute,
)

if TYPE_CHECKING:
    from deploy_manifest.resolvers.context import ResolverContext

logger = logging.getLogger(__name__)


class _Gathering:
    """Accumulator for one :meth:`ManagedVersionResolver.gather` call."""

    def __init__(self, properties: dict[str, str]) -> None:
        self.properties = properties
        self.versions: dict[str, str] = {}
        self.visiting: set[str] = set()


class ManagedVersionResolver:
    """Builds group:artifact -> version tables from dependency management."""

    def __init__(self, context: "ResolverContext") -> None:
        self.context = context

    def gather(
        self, manifest: Manifest, module_dir: Optional[Path]
    ) -> tuple[dict[str, str], dict[str, str]]:
        """Collect the managed versions visible to a manifest.

        Args:
            manifest: Manifest to resolve.
            module_dir: Directory holding the manifest.

        Returns:
            Tuple of (``group:artifact`` -> version map, property table
            enriched with the properties of imported BOMs). Both are fresh
            copies.
        """
        key = self.context.memo_key(manifest)
        cached = self.context.managed_versions.get(key)
        if cached is None:
            acc = _Gathering(self.context.properties.effective(manifest, module_dir))
            self._collect(manifest, module_dir, acc.properties, acc)
            cached = (acc.versions, acc.properties)
            self.context.managed_versions[key] = cached
            logger.debug(
                "Gathered %d managed versions for %s", len(acc.versions), manifest.coordinate
            )
        versions, properties = cached
        return dict(versions), dict(properties)

    def resolve_version(
        self,
        dependency: DependencyDeclaration,
        manifest: Manifest,
        module_dir: Optional[Path],
    ) -> Optional[str]:
        """Resolve the effective version of a dependency.

        Args:
            dependency: Declaration as found in the manifest.
            manifest: The declaring manifest.
            module_dir: Directory holding the declaring manifest.

        Returns:
            The declared version with placeholders expanded, else the managed
            version for its group:artifact, else None.
        """
        versions, properties = self.gather(manifest, module_dir)
        if dependency.version:
            version = (substitute(dependency.version, properties) or "").strip()
            if version:
                return version

        group_id = substitute(dependency.group_id, properties)
        artifact_id = substitute(dependency.artifact_id, properties)
        managed = versions.get(f"{group_id}:{artifact_id}")
        if managed is None:
            logger.debug(
                "No version for %s:%s in %s", group_id, artifact_id, manifest.coordinate
            )
        return managed

    def _collect(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        lookup: Mapping[str, str],
        acc: _Gathering,
    ) -> None:
        """Ingest a manifest's management section and then its ancestors'."""
        key = manifest.coordinate.key
        if key in acc.visiting:
            logger.debug("Management cycle detected at %s", key)
            return
        acc.visiting.add(key)

        self._ingest(manifest, lookup, acc)
        for parent, _ in self.context.parents.iter_ancestors(manifest, module_dir):
            if parent.coordinate.key in acc.visiting:
                logger.debug("Management cycle detected at %s", parent.coordinate)
                break
            acc.visiting.add(parent.coordinate.key)
            merge_properties(acc.properties, parent.properties)
            self._ingest(parent, lookup, acc)

    def _ingest(
        self, manifest: Manifest, lookup: Mapping[str, str], acc: _Gathering
    ) -> None:
        """Ingest the own entries of one manifest, then its BOM imports."""
        imports = []
        for declaration in manifest.managed_dependencies:
            if declaration.is_bom_import:
                imports.append(declaration)
                continue
            group_id = substitute(declaration.group_id, lookup)
            artifact_id = substitute(declaration.artifact_id, lookup)
            version = (substitute(declaration.version, lookup) or "").strip()
            if version:
                acc.versions.setdefault(f"{group_id}:{artifact_id}", version)

        for declaration in imports:
            self._import_bom(declaration, lookup, acc)

    def _import_bom(
        self,
        declaration: DependencyDeclaration,
        lookup: Mapping[str, str],
        acc: _Gathering,
    ) -> None:
        coordinate = Coordinate(
            substitute(declaration.group_id, lookup) or "",
            substitute(declaration.artifact_id, lookup) or "",
            (substitute(declaration.version, lookup) or "").strip(),
        )
        if not coordinate.is_complete() or has_placeholder(coordinate.key):
            logger.debug("Cannot resolve BOM coordinate %s", coordinate)
            return

        bom = self.context.load(coordinate)
        if bom is None:
            logger.debug("BOM %s not found in local repository", coordinate)
            return

        merge_properties(acc.properties, bom.properties)
        bom_properties = self.context.properties.effective(bom, bom.module_dir)
        logger.debug("Importing BOM %s", coordinate)
        self._collect(bom, bom.module_dir, ChainMap(bom_properties, acc.properties), acc)
