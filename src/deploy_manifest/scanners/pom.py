"""Scanner for Maven POM files.

This module parses ``pom.xml`` project descriptors (and ``*.pom`` files as
stored in a local repository) into :class:`Manifest` objects. Only the
elements needed for resolution are read: coordinates, parent, properties,
dependencies, dependency management, licenses and profiles.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from deploy_manifest.models import (
    DEFAULT_TYPE,
    DependencyDeclaration,
    LicenseDeclaration,
    Manifest,
    ParentRef,
    Profile,
)
from deploy_manifest.scanners.base import BaseScanner

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return child
    return None


def _children(element: Optional[ET.Element], name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [
        child
        for child in element
        if isinstance(child.tag, str) and _local_name(child.tag) == name
    ]


def _text(element: Optional[ET.Element], name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None:
        return None
    return (child.text or "").strip()


class PomScanner(BaseScanner):
    """Scanner for Maven POM descriptors.

    Namespaced (``http://maven.apache.org/POM/4.0.0``) and namespace-less
    documents are both accepted. Values are returned verbatim; ``${...}``
    placeholders are resolved later by the property resolver.
    """

    def scan(self) -> Manifest:
        """Parse the POM file.

        Returns:
            The parsed Manifest with ``path`` set to the source file.

        Raises:
            FileNotFoundError: If the source file does not exist.
            ValueError: If source_path is not set or the XML is invalid.
        """
        if self.source_path is None:
            raise ValueError("source_path must be set before calling scan()")

        if not self.source_path.is_file():
            raise FileNotFoundError(f"POM file not found: {self.source_path}")

        try:
            root = ET.parse(self.source_path).getroot()
        except (ET.ParseError, LookupError) as e:
            raise ValueError(f"Invalid XML in {self.source_path}: {e}") from e

        if _local_name(root.tag) != "project":
            raise ValueError(
                f"Expected <project> root element in {self.source_path}, "
                f"found <{_local_name(root.tag)}>"
            )

        manifest = self.parse_project(root)
        manifest.path = self.source_path
        return manifest

    @classmethod
    def parse_project(cls, root: ET.Element) -> Manifest:
        """Build a Manifest from a ``<project>`` element.

        Args:
            root: The ``<project>`` element.

        Returns:
            Manifest without a source path.
        """
        dependency_management = _child(root, "dependencyManagement")
        manifest = Manifest(
            group_id=_text(root, "groupId") or "",
            artifact_id=_text(root, "artifactId") or "",
            version=_text(root, "version") or "",
            packaging=_text(root, "packaging") or DEFAULT_TYPE,
            name=_text(root, "name") or None,
            parent=cls._parse_parent(_child(root, "parent")),
            properties=cls._parse_properties(_child(root, "properties")),
            dependencies=cls._parse_dependencies(_child(root, "dependencies")),
            managed_dependencies=cls._parse_dependencies(
                _child(dependency_management, "dependencies")
            ),
            licenses=cls._parse_licenses(_child(root, "licenses")),
            profiles=cls._parse_profiles(_child(root, "profiles")),
        )
        logger.debug(
            "Parsed %s with %d dependencies, %d managed, %d licenses",
            manifest.coordinate,
            len(manifest.dependencies),
            len(manifest.managed_dependencies),
            len(manifest.licenses),
        )
        return manifest

    @staticmethod
    def _parse_parent(element: Optional[ET.Element]) -> Optional[ParentRef]:
        if element is None:
            return None
        return ParentRef(
            group_id=_text(element, "groupId") or "",
            artifact_id=_text(element, "artifactId") or "",
            version=_text(element, "version") or "",
            relative_path=_text(element, "relativePath"),
        )

    @staticmethod
    def _parse_properties(element: Optional[ET.Element]) -> dict[str, str]:
        properties: dict[str, str] = {}
        if element is None:
            return properties
        for child in element:
            if not isinstance(child.tag, str):
                continue
            # First declaration wins, as for every other property merge
            properties.setdefault(_local_name(child.tag), (child.text or "").strip())
        return properties

    @staticmethod
    def _parse_dependencies(
        element: Optional[ET.Element],
    ) -> list[DependencyDeclaration]:
        declarations = []
        for dep in _children(element, "dependency"):
            declarations.append(
                DependencyDeclaration(
                    group_id=_text(dep, "groupId") or "",
                    artifact_id=_text(dep, "artifactId") or "",
                    version=_text(dep, "version") or "",
                    scope=_text(dep, "scope") or "",
                    type=_text(dep, "type") or DEFAULT_TYPE,
                    optional=(_text(dep, "optional") or "").lower() == "true",
                )
            )
        return declarations

    @staticmethod
    def _parse_licenses(element: Optional[ET.Element]) -> list[LicenseDeclaration]:
        return [
            LicenseDeclaration(
                name=_text(lic, "name") or "",
                url=_text(lic, "url") or None,
            )
            for lic in _children(element, "license")
        ]

    @staticmethod
    def _parse_profiles(element: Optional[ET.Element]) -> list[Profile]:
        profiles = []
        for profile in _children(element, "profile"):
            profile_id = _text(profile, "id")
            if not profile_id:
                continue
            activation = _child(profile, "activation")
            active = (_text(activation, "activeByDefault") or "").lower() == "true"
            profiles.append(Profile(id=profile_id, active_by_default=active))
        return profiles

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this scanner can handle the given file.

        Args:
            path: Path to check.

        Returns:
            True for ``pom.xml`` (and ``*pom.xml`` variants) or ``*.pom`` files.
        """
        name = path.name.lower()
        return name.endswith("pom.xml") or name.endswith(".pom")

    @property
    def source_name(self) -> str:
        """Return the string "pom.xml"."""
        return "pom.xml"
