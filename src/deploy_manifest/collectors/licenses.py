"""License aggregation over a module's dependency graph.

For every dependency surfaced by the graph walker, the dependency's own
manifest is read from the local repository and its ``<licenses>`` are
recorded. A manifest without licenses inherits those of the nearest
ancestor that declares some. Anything that cannot be read is reported as
"unknown" instead of failing the scan.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from deploy_manifest.collectors.compliance import summarize
from deploy_manifest.models import (
    UNKNOWN_LICENSE,
    LicenseDeclaration,
    LicenseDetail,
    LicenseOptions,
    LicenseReport,
    LicenseWarning,
    Manifest,
    ResolvedDependency,
)
from deploy_manifest.resolvers.context import ResolverContext
from deploy_manifest.resolvers.graph import flatten

logger = logging.getLogger(__name__)

LICENSE_SEPARATOR = " OR "

_TOKEN_SPLIT = re.compile(r"\s+(?:OR|AND)\s+", re.IGNORECASE)


def tokenize_license(label: Optional[str]) -> list[str]:
    """Split a license label into its constituent license names.

    Splits on whitespace-delimited ``OR`` / ``AND`` (any case), trims each
    token and drops blanks.
    """
    if not label:
        return []
    return [token.strip() for token in _TOKEN_SPLIT.split(label) if token.strip()]


def license_names(licenses: list[LicenseDeclaration]) -> list[str]:
    """Return the non-blank, trimmed names of license declarations."""
    return [lic.name.strip() for lic in licenses if lic.name and lic.name.strip()]


def _unknown_warning(artifact: str) -> LicenseWarning:
    return LicenseWarning(
        severity="MEDIUM",
        artifact=artifact,
        license=UNKNOWN_LICENSE,
        reason="License information not found in POM",
        recommendation=(
            "Add <licenses> to dependency POM or replace with clearly "
            "licensed alternative"
        ),
    )


def _incompatible_warning(artifact: str, label: str, token: str) -> LicenseWarning:
    return LicenseWarning(
        severity="HIGH",
        artifact=artifact,
        license=label,
        reason=f"Incompatible license detected: {token}",
        recommendation="Replace with Apache-2.0 or MIT licensed alternative",
    )


class _Aggregation:
    """Accumulators of one :meth:`LicenseCollector.collect` call."""

    def __init__(self, options: LicenseOptions) -> None:
        self.options = options
        self.incompatible = options.normalized_incompatible_set()
        self.details: list[LicenseDetail] = []
        self.by_type: dict[str, int] = {}
        self.warnings: list[LicenseWarning] = []
        self.incompatible_count = 0

    def count(self, name: str) -> None:
        self.by_type[name] = self.by_type.get(name, 0) + 1


class LicenseCollector:
    """Collects license provenance for a module's dependencies.

    Attributes:
        context: Resolution context of the current analysis.
    """

    def __init__(self, context: ResolverContext) -> None:
        self.context = context

    def collect(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        options: Optional[LicenseOptions],
    ) -> Optional[LicenseReport]:
        """Build the license report of a module.

        Args:
            manifest: Root manifest of the module.
            module_dir: Directory holding the root manifest.
            options: License options; the report is skipped unless
                ``options.include`` is set.

        Returns:
            LicenseReport, or None when the feature is disabled.
        """
        if options is None or not options.include:
            return None

        entries = self.context.graph.walk(
            manifest,
            module_dir,
            allowed_scopes=options.normalized_scopes(),
            include_optional=options.include_optional,
            transitive=options.include_transitive_licenses,
        )

        acc = _Aggregation(options)
        for entry in flatten(entries):
            self._process(entry, acc)

        summary, compliance = summarize(acc.details, acc.by_type, acc.incompatible_count)
        logger.info(
            "Collected licenses for %d dependencies of %s (%d unknown, %d incompatible)",
            summary.total,
            manifest.coordinate,
            summary.unknown,
            compliance.incompatible_count,
        )
        return LicenseReport(
            summary=summary,
            compliance=compliance,
            details=acc.details,
            warnings=acc.warnings,
        )

    def find_licenses(
        self, manifest: Optional[Manifest]
    ) -> list[LicenseDeclaration]:
        """Return a manifest's licenses, inherited from ancestors if absent.

        Args:
            manifest: Dependency manifest, or None if it could not be loaded.

        Returns:
            The first non-empty license list on the way up the parent chain,
            or an empty list.
        """
        if manifest is None:
            return []
        if license_names(manifest.licenses):
            return manifest.licenses
        for ancestor, _ in self.context.parents.iter_ancestors(
            manifest, manifest.module_dir
        ):
            if license_names(ancestor.licenses):
                logger.debug(
                    "Licenses of %s inherited from %s",
                    manifest.coordinate,
                    ancestor.coordinate,
                )
                return ancestor.licenses
        return []

    def _process(self, entry: ResolvedDependency, acc: _Aggregation) -> None:
        coordinate = entry.coordinate
        dep_manifest = (
            self.context.load(coordinate) if coordinate.is_complete() else None
        )
        licenses = self.find_licenses(dep_manifest)
        names = license_names(licenses)

        label = LICENSE_SEPARATOR.join(names) if names else UNKNOWN_LICENSE
        license_url = licenses[0].url if names else None

        acc.details.append(
            LicenseDetail(
                group_id=coordinate.group_id,
                artifact_id=coordinate.artifact_id,
                version=coordinate.version,
                scope=entry.scope,
                license=label,
                license_url=license_url,
                multi_license=len(names) > 1,
                depth=entry.depth,
            )
        )

        if not names:
            acc.count(UNKNOWN_LICENSE)
            if acc.options.emit_warnings:
                acc.warnings.append(_unknown_warning(coordinate.key))
            return

        for name in names:
            acc.count(name)

        for token in tokenize_license(label):
            if token.lower() in acc.incompatible:
                acc.incompatible_count += 1
                if acc.options.emit_warnings:
                    acc.warnings.append(
                        _incompatible_warning(coordinate.key, label, token)
                    )
                break
