"""Deploy Manifest - Maven module resolution and license provenance reports.

This package reconstructs the effective configuration of a Maven module
from its POM, its parents and imported BOMs in a local repository, and
reports its dependencies, their licenses and its build properties.
"""

__version__ = "0.1.0"
__author__ = "forkrul"

from deploy_manifest.analyzer import ModuleAnalyzer
from deploy_manifest.models import (
    Coordinate,
    DependencyTreeOptions,
    LicenseOptions,
    LicenseReport,
    Manifest,
    ModuleReport,
    PropertyOptions,
)
from deploy_manifest.store import ManifestStore

__all__ = [
    "__version__",
    "Coordinate",
    "DependencyTreeOptions",
    "LicenseOptions",
    "LicenseReport",
    "Manifest",
    "ManifestStore",
    "ModuleAnalyzer",
    "ModuleReport",
    "PropertyOptions",
]
