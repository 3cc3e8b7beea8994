"""Manifest scanners.

This module provides scanners for parsing build descriptors into
:class:`~deploy_manifest.models.Manifest` objects.
"""

from pathlib import Path

from deploy_manifest.scanners.base import BaseScanner
from deploy_manifest.scanners.pom import PomScanner

__all__ = [
    "BaseScanner",
    "PomScanner",
    "get_scanner",
]

# Registry of available scanners in priority order
_SCANNERS: list[type[BaseScanner]] = [
    PomScanner,
]


def get_scanner(path: Path) -> BaseScanner:
    """Get the appropriate scanner for a given manifest path.

    Args:
        path: Path to the manifest file.

    Returns:
        Scanner instance configured for the given file.

    Raises:
        ValueError: If no scanner can handle the given file.
    """
    for scanner_cls in _SCANNERS:
        if scanner_cls.can_handle(path):
            return scanner_cls(path)

    raise ValueError(
        f"No scanner available for '{path.name}'. "
        f"Supported files: pom.xml, *.pom"
    )
