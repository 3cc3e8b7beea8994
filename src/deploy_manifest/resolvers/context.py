"""Per-analysis resolution context.

A :class:`ResolverContext` bundles every piece of mutable state one module
analysis needs: the manifest store, a memo of manifests already loaded from
it, and memos of resolved property tables and managed-version maps. A new
context is built for each analysis and dropped with it, so nothing leaks
between modules.
"""

import logging
from typing import Optional

from deploy_manifest.models import Coordinate, Manifest
from deploy_manifest.resolvers.graph import DependencyGraphWalker
from deploy_manifest.resolvers.managed import ManagedVersionResolver
from deploy_manifest.resolvers.parents import ParentChainWalker
from deploy_manifest.resolvers.properties import PropertyResolver
from deploy_manifest.store import ManifestStore

logger = logging.getLogger(__name__)


class ResolverContext:
    """Explicit state threaded through one resolution run.

    Attributes:
        store: Local repository lookup.
        properties: Property resolver bound to this context.
        parents: Parent chain walker bound to this context.
        versions: Managed version resolver bound to this context.
        graph: Dependency graph walker bound to this context.
    """

    def __init__(self, store: Optional[ManifestStore] = None) -> None:
        """Initialize a fresh context.

        Args:
            store: Manifest store to read from. If None, uses the default
                local repository.
        """
        self.store = store or ManifestStore()
        self._manifests: dict[str, Optional[Manifest]] = {}
        self.property_tables: dict[str, dict[str, str]] = {}
        self.managed_versions: dict[str, tuple[dict[str, str], dict[str, str]]] = {}

        self.properties = PropertyResolver(self)
        self.parents = ParentChainWalker(self)
        self.versions = ManagedVersionResolver(self)
        self.graph = DependencyGraphWalker(self)

    def load(self, coordinate: Coordinate) -> Optional[Manifest]:
        """Load a manifest from the store, at most once per coordinate.

        Args:
            coordinate: Coordinate to look up.

        Returns:
            The parsed Manifest, or None if the store has none.
        """
        key = coordinate.key
        if key not in self._manifests:
            self._manifests[key] = self.store.load(coordinate)
        return self._manifests[key]

    @staticmethod
    def memo_key(manifest: Manifest) -> str:
        """Return the key used to memoize per-manifest results."""
        return f"{manifest.coordinate.key}@{manifest.path or ''}"
