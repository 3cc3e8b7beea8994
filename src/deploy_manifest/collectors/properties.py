"""Build-property snapshot: project identifiers, properties and profiles.

Property values are taken from the module's effective property table (own
properties plus those inherited from its parents) with placeholders
expanded. Values whose key looks sensitive are masked or dropped.
"""

import logging
import os
import platform
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from deploy_manifest.models import (
    BuildProperties,
    Manifest,
    ProfilesInfo,
    PropertyOptions,
)
from deploy_manifest.resolvers.context import ResolverContext
from deploy_manifest.resolvers.properties import identity_properties, substitute

logger = logging.getLogger(__name__)

MASKED_VALUE = "***MASKED***"

_BUILD_FLAGS = {"skiptests", "enforcer.skip"}


def is_build_flag(key: str) -> bool:
    """Return True for ``maven.*`` keys and well-known build switches."""
    lowered = key.lower()
    return lowered.startswith("maven.") or lowered in _BUILD_FLAGS


def is_sensitive(key: str, sensitive: set[str]) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in sensitive)


def system_snapshot() -> dict[str, str]:
    """Return interpreter and platform facts relevant to a build."""
    return {
        "os.name": platform.system(),
        "os.version": platform.release(),
        "os.arch": platform.machine(),
        "python.version": platform.python_version(),
        "python.implementation": platform.python_implementation(),
        "user.dir": os.getcwd(),
    }


class _Masker:
    """Applies the sensitive-key policy and counts masked values."""

    def __init__(self, options: PropertyOptions) -> None:
        self.options = options
        self.sensitive = options.sensitive_keys()
        self.masked = 0

    def put(self, target: dict[str, str], key: str, value: Optional[str]) -> None:
        key = key.strip()
        value = value or ""
        if self.options.filter_sensitive_properties and is_sensitive(key, self.sensitive):
            if self.options.mask_sensitive_values:
                target[key] = MASKED_VALUE
                self.masked += 1
            return
        target[key] = value

    def copy(self, source: Mapping[str, str]) -> dict[str, str]:
        target: dict[str, str] = {}
        for key in sorted(source):
            self.put(target, key, source[key])
        return target


class PropertyCollector:
    """Collects the build-property snapshot and profile listing of a module."""

    def __init__(self, context: ResolverContext) -> None:
        self.context = context

    def collect(
        self,
        manifest: Manifest,
        module_dir: Optional[Path],
        options: Optional[PropertyOptions],
    ) -> tuple[Optional[BuildProperties], ProfilesInfo]:
        """Collect properties and profiles.

        Args:
            manifest: Root manifest of the module.
            module_dir: Directory holding the root manifest.
            options: Property options; properties are skipped unless
                ``options.include`` is set. Profiles are always listed.

        Returns:
            Tuple of (BuildProperties or None, ProfilesInfo).
        """
        profiles = self.collect_profiles(manifest)
        if options is None or not options.include:
            return None, profiles

        masker = _Masker(options)
        coordinate = manifest.coordinate
        project = {
            "project.groupId": coordinate.group_id,
            "project.artifactId": coordinate.artifact_id,
            "project.version": coordinate.version,
            "project.packaging": manifest.packaging,
        }
        if manifest.name:
            project["project.name"] = manifest.name

        table = self.context.properties.effective(manifest, module_dir)
        seeded = identity_properties(manifest)
        maven: dict[str, str] = {}
        custom: dict[str, str] = {}
        for key in sorted(table):
            if key in seeded or key.startswith("project."):
                continue
            value = substitute(table[key], table)
            masker.put(maven if is_build_flag(key) else custom, key, value)

        system = masker.copy(system_snapshot()) if options.include_system_properties else None
        environment = (
            masker.copy(os.environ) if options.include_environment_variables else None
        )

        logger.debug(
            "Collected %d maven and %d custom properties for %s (%d masked)",
            len(maven),
            len(custom),
            coordinate,
            masker.masked,
        )
        return (
            BuildProperties(
                project=project,
                maven=maven,
                custom=custom,
                system=system,
                environment=environment,
                masked_count=masker.masked,
            ),
            profiles,
        )

    @staticmethod
    def collect_profiles(manifest: Manifest) -> ProfilesInfo:
        """List declared profiles and the first one active by default."""
        default_profile = next(
            (p.id for p in manifest.profiles if p.active_by_default), None
        )
        return ProfilesInfo(
            available=[p.id for p in manifest.profiles],
            default_profile=default_profile,
        )
