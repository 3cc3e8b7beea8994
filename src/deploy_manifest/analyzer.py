"""Per-module analysis entry point.

A :class:`ModuleAnalyzer` holds the option sets and the manifest store; each
call to :meth:`ModuleAnalyzer.analyze` builds a fresh
:class:`~deploy_manifest.resolvers.ResolverContext`, runs the enabled
collectors and returns a :class:`~deploy_manifest.models.ModuleReport`.
"""

import logging
from pathlib import Path
from typing import Optional

from deploy_manifest.collectors import (
    DependencyTreeCollector,
    LicenseCollector,
    PropertyCollector,
)
from deploy_manifest.models import (
    DependencyTreeOptions,
    LicenseOptions,
    Manifest,
    ModuleReport,
    PropertyOptions,
)
from deploy_manifest.resolvers import ResolverContext
from deploy_manifest.scanners import get_scanner
from deploy_manifest.store import ManifestStore

logger = logging.getLogger(__name__)


class ModuleAnalyzer:
    """Analyzes one module manifest at a time.

    Attributes:
        tree_options: Dependency tree options.
        license_options: License aggregation options.
        property_options: Build-property snapshot options.
        store: Local repository to resolve parents, BOMs and dependencies from.
    """

    def __init__(
        self,
        tree_options: Optional[DependencyTreeOptions] = None,
        license_options: Optional[LicenseOptions] = None,
        property_options: Optional[PropertyOptions] = None,
        store: Optional[ManifestStore] = None,
    ) -> None:
        self.tree_options = tree_options or DependencyTreeOptions()
        self.license_options = license_options or LicenseOptions()
        self.property_options = property_options or PropertyOptions()
        self.store = store or ManifestStore()

    def analyze(self, pom_path: Path) -> ModuleReport:
        """Analyze the module described by a manifest file.

        Args:
            pom_path: Path to the module's ``pom.xml`` (or its directory).

        Returns:
            The module report.

        Raises:
            FileNotFoundError: If the manifest does not exist.
            ValueError: If the manifest cannot be parsed.
        """
        if pom_path.is_dir():
            pom_path = pom_path / "pom.xml"
        manifest = get_scanner(pom_path).scan()
        return self.analyze_manifest(manifest, pom_path.parent)

    def analyze_manifest(
        self, manifest: Manifest, module_dir: Optional[Path] = None
    ) -> ModuleReport:
        """Analyze an already parsed manifest.

        Args:
            manifest: Root manifest of the module.
            module_dir: Directory holding the manifest; defaults to the
                directory of ``manifest.path``.

        Returns:
            The module report.
        """
        if module_dir is None:
            module_dir = manifest.module_dir

        context = ResolverContext(self.store)
        logger.info("Analyzing %s", manifest.coordinate)

        dependencies = DependencyTreeCollector(context).collect(
            manifest, module_dir, self.tree_options
        )
        licenses = LicenseCollector(context).collect(
            manifest, module_dir, self.license_options
        )
        properties, profiles = PropertyCollector(context).collect(
            manifest, module_dir, self.property_options
        )

        return ModuleReport(
            coordinate=manifest.coordinate,
            name=manifest.name,
            packaging=manifest.packaging,
            dependencies=dependencies,
            licenses=licenses,
            properties=properties,
            profiles=profiles,
        )
