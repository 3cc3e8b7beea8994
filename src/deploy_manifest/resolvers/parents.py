"""Parent manifest discovery.

Parents are looked up the way Maven does it: an explicit ``relativePath``
first, then the conventional ``../pom.xml`` (only if it really is the
declared parent), and finally the local repository.
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from deploy_manifest.models import Manifest, ParentRef
from deploy_manifest.scanners.pom import PomScanner

if TYPE_CHECKING:
    from deploy_manifest.resolvers.context import ResolverContext

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "pom.xml"


def _read_manifest(path: Path) -> Optional[Manifest]:
    try:
        return PomScanner(path).scan()
    except (ValueError, OSError) as e:
        logger.debug("Could not read candidate parent %s: %s", path, e)
        return None


def matches_parent(candidate: Manifest, parent: ParentRef) -> bool:
    """Check that a candidate manifest is the declared parent.

    The candidate's group and version fall back to its own parent
    reference, exactly like its effective coordinate.

    Args:
        candidate: Manifest found at a conventional location.
        parent: The declared parent reference.

    Returns:
        True if group, artifact and version all match exactly.
    """
    return candidate.coordinate == parent.coordinate


class ParentChainWalker:
    """Finds parent manifests and walks the parent chain upward."""

    def __init__(self, context: "ResolverContext") -> None:
        self.context = context

    def find_parent(
        self, manifest: Manifest, module_dir: Optional[Path]
    ) -> Optional[Manifest]:
        """Locate the parent manifest of a manifest.

        Args:
            manifest: Manifest whose parent is wanted.
            module_dir: Directory holding the manifest. When None, only the
                local repository is consulted.

        Returns:
            The parent Manifest, or None if no parent is declared or none
            could be found.
        """
        parent = manifest.parent
        if parent is None:
            return None

        if module_dir is not None:
            if parent.relative_path:
                candidate = module_dir / parent.relative_path
                if candidate.is_dir():
                    candidate = candidate / MANIFEST_FILE_NAME
                if candidate.is_file():
                    found = _read_manifest(candidate)
                    if found is not None:
                        logger.debug(
                            "Parent of %s found via relativePath %s",
                            manifest.coordinate,
                            candidate,
                        )
                        return found
            elif parent.relative_path is None:
                candidate = module_dir.parent / MANIFEST_FILE_NAME
                if candidate.is_file():
                    found = _read_manifest(candidate)
                    if found is not None and matches_parent(found, parent):
                        logger.debug(
                            "Parent of %s found at %s", manifest.coordinate, candidate
                        )
                        return found
                    if found is not None:
                        logger.debug(
                            "Ignoring %s: %s is not the declared parent %s",
                            candidate,
                            found.coordinate,
                            parent.coordinate,
                        )

        return self.context.load(parent.coordinate)

    def iter_ancestors(
        self, manifest: Manifest, module_dir: Optional[Path]
    ) -> Iterator[tuple[Manifest, Optional[Path]]]:
        """Yield each ancestor of a manifest, nearest first.

        The walk keeps its own visited set, seeded with the starting
        manifest, and stops at the first coordinate seen twice.

        Args:
            manifest: Manifest to start from (not yielded).
            module_dir: Directory holding the starting manifest.

        Yields:
            Tuples of (ancestor manifest, directory holding it).
        """
        visited = {manifest.coordinate.key}
        current, current_dir = manifest, module_dir
        while True:
            parent = self.find_parent(current, current_dir)
            if parent is None:
                return
            key = parent.coordinate.key
            if key in visited:
                logger.debug(
                    "Parent cycle detected at %s while walking from %s",
                    key,
                    manifest.coordinate,
                )
                return
            visited.add(key)
            parent_dir = parent.module_dir
            yield parent, parent_dir
            current, current_dir = parent, parent_dir
