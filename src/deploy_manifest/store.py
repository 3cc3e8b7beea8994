"""Local artifact repository lookup for manifests.

The store reads POM files from a pre-populated local repository laid out
the Maven way (``group/path/artifact/version/artifact-version.pom``). It
never performs network access and never raises to its callers: anything
that goes wrong is reported as "not found".
"""

import logging
import os
from pathlib import Path
from typing import Optional

from deploy_manifest.models import Coordinate, Manifest
from deploy_manifest.scanners.pom import PomScanner

logger = logging.getLogger(__name__)

REPO_ENV_VAR = "MAVEN_REPO_LOCAL"


def default_repository() -> Path:
    """Return the configured local repository root.

    Uses ``$MAVEN_REPO_LOCAL`` when set, otherwise ``~/.m2/repository``.
    """
    configured = os.environ.get(REPO_ENV_VAR, "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".m2" / "repository"


class ManifestStore:
    """Read-only view of a local artifact repository.

    Attributes:
        repo_root: Root directory of the local repository.
        extension: File extension of stored manifests (default: "pom").
    """

    DEFAULT_EXTENSION = "pom"

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        extension: str = DEFAULT_EXTENSION,
    ) -> None:
        """Initialize the store.

        Args:
            repo_root: Local repository root. If None, uses
                :func:`default_repository`.
            extension: Manifest file extension, without the dot.
        """
        self.repo_root = repo_root if repo_root is not None else default_repository()
        self.extension = extension

    def path_for(self, coordinate: Coordinate) -> Path:
        """Return the conventional location of a coordinate's manifest."""
        group_path = Path(*coordinate.group_id.split("."))
        file_name = f"{coordinate.artifact_id}-{coordinate.version}.{self.extension}"
        return (
            self.repo_root
            / group_path
            / coordinate.artifact_id
            / coordinate.version
            / file_name
        )

    def load(self, coordinate: Coordinate) -> Optional[Manifest]:
        """Locate and parse the manifest for a coordinate.

        Args:
            coordinate: Coordinate to look up.

        Returns:
            The parsed Manifest, or None if it is missing, unreadable or
            malformed.
        """
        if not coordinate.is_complete():
            logger.debug("Skipping lookup of incomplete coordinate %s", coordinate)
            return None

        path = self.path_for(coordinate)
        if not path.is_file():
            logger.debug("No manifest for %s at %s", coordinate, path)
            return None

        try:
            return PomScanner(path).scan()
        except (ValueError, OSError) as e:
            logger.debug("Failed to read manifest for %s: %s", coordinate, e)
            return None
