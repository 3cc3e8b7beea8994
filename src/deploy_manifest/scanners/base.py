"""Base interface for manifest scanners.

Scanners turn a build descriptor file into a :class:`Manifest` without
resolving anything: placeholders, inherited values and managed versions
are left exactly as declared.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from deploy_manifest.models import Manifest


class BaseScanner(ABC):
    """Abstract base class for manifest scanners.

    Attributes:
        source_path: Optional path to the manifest file being scanned.
    """

    def __init__(self, source_path: Optional[Path] = None) -> None:
        """Initialize the scanner.

        Args:
            source_path: Optional path to the manifest file.
        """
        self.source_path = source_path

    @abstractmethod
    def scan(self) -> Manifest:
        """Parse the source file into a manifest.

        Returns:
            The parsed Manifest.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If the source format is invalid.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True if this scanner can process the file, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return a human-readable name for this scanner's source type."""
        ...
