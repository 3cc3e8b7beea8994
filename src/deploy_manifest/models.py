"""Core data models for deploy_manifest.

This module defines the fundamental data structures used throughout the
manifest resolution engine: coordinates, parsed manifests, resolved
dependency entries, license and dependency reports, and the option sets
that control a module analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

DEFAULT_SCOPE = "compile"
DEFAULT_TYPE = "jar"
UNKNOWN_LICENSE = "unknown"


def normalize_scope(scope: Optional[str]) -> str:
    """Normalize a dependency scope for comparison.

    Args:
        scope: Raw scope string from a manifest, possibly blank or None.

    Returns:
        Trimmed lower-case scope, or "compile" when blank.
    """
    if scope is None or not scope.strip():
        return DEFAULT_SCOPE
    return scope.strip().lower()


def default_scopes() -> set[str]:
    """Return the default scope set (compile + runtime)."""
    return {"compile", "runtime"}


@dataclass(frozen=True)
class Coordinate:
    """Immutable (group, artifact, version) identity of a module.

    Frozen for hashability so coordinates can be used in visited sets.

    Attributes:
        group_id: Group identifier (e.g., "org.apache.commons").
        artifact_id: Artifact identifier (e.g., "commons-lang3").
        version: Exact version string, compared verbatim.
    """

    group_id: str
    artifact_id: str
    version: str

    @property
    def key(self) -> str:
        """Return the colon-joined identity key ``group:artifact:version``."""
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def ga(self) -> str:
        """Return the ``group:artifact`` key used for managed versions."""
        return f"{self.group_id}:{self.artifact_id}"

    def is_complete(self) -> bool:
        """Return True if all three fields are non-blank."""
        return all(
            part and part.strip()
            for part in (self.group_id, self.artifact_id, self.version)
        )

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class ParentRef:
    """Reference to a parent manifest.

    Attributes:
        group_id: Parent group identifier.
        artifact_id: Parent artifact identifier.
        version: Parent version.
        relative_path: Declared relative path. None when the element is
            absent, an empty string when it is declared empty.
    """

    group_id: str
    artifact_id: str
    version: str
    relative_path: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id, self.version)


@dataclass(frozen=True)
class LicenseDeclaration:
    """A ``<license>`` entry as declared in a manifest."""

    name: str
    url: Optional[str] = None


@dataclass(frozen=True)
class Profile:
    """A build profile declared in a manifest."""

    id: str
    active_by_default: bool = False


@dataclass(frozen=True)
class DependencyDeclaration:
    """A dependency (or managed dependency) as declared in a manifest.

    Attributes:
        group_id: Dependency group identifier (may contain placeholders).
        artifact_id: Dependency artifact identifier (may contain placeholders).
        version: Declared version, possibly a placeholder or empty.
        scope: Raw declared scope, possibly empty.
        type: Artifact type (default "jar").
        optional: True if declared ``<optional>true</optional>``.
    """

    group_id: str
    artifact_id: str
    version: str = ""
    scope: str = ""
    type: str = DEFAULT_TYPE
    optional: bool = False

    @property
    def normalized_scope(self) -> str:
        return normalize_scope(self.scope)

    @property
    def is_bom_import(self) -> bool:
        """Return True for an imported bill-of-materials declaration."""
        return (
            self.type.strip().lower() == "pom"
            and self.normalized_scope == "import"
        )


@dataclass
class Manifest:
    """A parsed build descriptor for one module.

    Attributes:
        group_id: Own declared group identifier (may be empty).
        artifact_id: Own declared artifact identifier.
        version: Own declared version (may be empty).
        packaging: Packaging type (default "jar").
        name: Optional human-readable name.
        parent: Optional parent reference.
        properties: Declared properties in document order.
        dependencies: Direct dependency declarations.
        managed_dependencies: Entries of ``<dependencyManagement>``.
        licenses: Declared licenses.
        profiles: Declared build profiles.
        path: File the manifest was parsed from, if any.
    """

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    packaging: str = DEFAULT_TYPE
    name: Optional[str] = None
    parent: Optional[ParentRef] = None
    properties: dict[str, str] = field(default_factory=dict)
    dependencies: list[DependencyDeclaration] = field(default_factory=list)
    managed_dependencies: list[DependencyDeclaration] = field(default_factory=list)
    licenses: list[LicenseDeclaration] = field(default_factory=list)
    profiles: list[Profile] = field(default_factory=list)
    path: Optional[Path] = None

    @property
    def effective_group_id(self) -> str:
        if self.group_id:
            return self.group_id
        return self.parent.group_id if self.parent else ""

    @property
    def effective_artifact_id(self) -> str:
        return self.artifact_id

    @property
    def effective_version(self) -> str:
        if self.version:
            return self.version
        return self.parent.version if self.parent else ""

    @property
    def coordinate(self) -> Coordinate:
        """Return the effective coordinate of this manifest."""
        return Coordinate(
            self.effective_group_id,
            self.effective_artifact_id,
            self.effective_version,
        )

    @property
    def module_dir(self) -> Optional[Path]:
        """Return the directory containing the manifest file, if known."""
        return self.path.parent if self.path else None


@dataclass
class ResolvedDependency:
    """A dependency surfaced by the graph walker.

    Attributes:
        declaration: The declaration as found in the declaring manifest.
        version: Resolved version, or None if it could not be determined.
        depth: Hops from the root module (1 = direct).
        path: Chain of ``group:artifact:type:version`` segments from the
            first direct dependency down to this entry.
        children: Transitive dependencies first reached through this entry.
    """

    declaration: DependencyDeclaration
    version: Optional[str]
    depth: int
    path: list[str] = field(default_factory=list)
    children: list["ResolvedDependency"] = field(default_factory=list)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(
            self.declaration.group_id,
            self.declaration.artifact_id,
            self.version or "",
        )

    @property
    def scope(self) -> str:
        return self.declaration.normalized_scope


# --- Dependency tree report -------------------------------------------------


class DependencyTreeFormat(str, Enum):
    """Output shape of the dependency tree report."""

    FLAT = "flat"
    TREE = "tree"
    BOTH = "both"


@dataclass
class DependencyFlatEntry:
    """Entry of the flat dependency listing."""

    group_id: str
    artifact_id: str
    version: str
    scope: str
    type: str
    optional: bool
    depth: int
    path: str


@dataclass
class DependencyNode:
    """Node of the nested dependency tree."""

    group_id: str
    artifact_id: str
    version: str
    scope: str
    type: str
    optional: bool
    children: list["DependencyNode"] = field(default_factory=list)


@dataclass
class DependencySummary:
    """Counts for the dependency section, including a scope breakdown."""

    total: int
    direct: int
    transitive: int
    scopes: dict[str, int] = field(default_factory=dict)
    optional: int = 0


@dataclass
class DependencyTreeReport:
    """Dependency summary plus flat and/or tree representations."""

    summary: DependencySummary
    flat: Optional[list[DependencyFlatEntry]] = None
    tree: Optional[list[DependencyNode]] = None


# --- License report ---------------------------------------------------------


@dataclass
class LicenseDetail:
    """License provenance of one dependency.

    Attributes:
        group_id: Dependency group identifier.
        artifact_id: Dependency artifact identifier.
        version: Resolved version (empty if unresolved).
        scope: Normalized scope.
        license: License label; names joined with " OR ", or "unknown".
        license_url: URL of the first declared license, if any.
        multi_license: True if more than one license name was declared.
        depth: Depth of the dependency in the graph (1 = direct).
    """

    group_id: str
    artifact_id: str
    version: str
    scope: str
    license: str
    license_url: Optional[str] = None
    multi_license: bool = False
    depth: int = 1

    @property
    def artifact(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class LicenseWarning:
    """A license finding that needs attention."""

    severity: str
    artifact: str
    license: str
    reason: str
    recommendation: str


@dataclass
class LicenseSummary:
    """Counts over the license details plus the license-type histogram."""

    total: int
    identified: int
    unknown: int
    by_type: dict[str, int] = field(default_factory=dict)


@dataclass
class LicenseCompliance:
    """Boolean compliance flags derived from the license details."""

    has_incompatible_licenses: bool
    incompatible_count: int
    unknown_count: int
    commercially_viable: bool
    requires_attribution: bool


@dataclass
class LicenseReport:
    """Aggregated license information for a module."""

    summary: LicenseSummary
    compliance: LicenseCompliance
    details: list[LicenseDetail] = field(default_factory=list)
    warnings: list[LicenseWarning] = field(default_factory=list)


# --- Build properties ---------------------------------------------------------


@dataclass
class BuildProperties:
    """Grouped build properties for traceability.

    Attributes:
        project: Core project identifiers (groupId, artifactId, version, ...).
        maven: ``maven.*`` keys and well-known build flags.
        custom: User-defined properties not categorized above.
        system: Interpreter and platform facts (optional).
        environment: Environment variables (optional).
        masked_count: Number of values masked as sensitive.
    """

    project: dict[str, str] = field(default_factory=dict)
    maven: dict[str, str] = field(default_factory=dict)
    custom: dict[str, str] = field(default_factory=dict)
    system: Optional[dict[str, str]] = None
    environment: Optional[dict[str, str]] = None
    masked_count: int = 0


@dataclass
class ProfilesInfo:
    """Profiles declared by a module."""

    available: list[str] = field(default_factory=list)
    default_profile: Optional[str] = None


@dataclass
class ModuleReport:
    """Everything the analyzer produced for one module."""

    coordinate: Coordinate
    name: Optional[str] = None
    packaging: str = DEFAULT_TYPE
    dependencies: Optional[DependencyTreeReport] = None
    licenses: Optional[LicenseReport] = None
    properties: Optional[BuildProperties] = None
    profiles: Optional[ProfilesInfo] = None


# --- Options ----------------------------------------------------------------


@dataclass
class LicenseOptions:
    """Options controlling license aggregation.

    Attributes:
        include: Enable the license report (disabled by default).
        emit_warnings: Emit MEDIUM/HIGH license warnings.
        include_transitive_licenses: Walk transitive dependencies, not only
            direct ones.
        allowed_scopes: Dependency scopes to consider.
        include_optional: Consider optional dependencies.
        incompatible_licenses: License names treated as incompatible
            (compared case-insensitively).
    """

    include: bool = False
    emit_warnings: bool = True
    include_transitive_licenses: bool = False
    allowed_scopes: set[str] = field(default_factory=default_scopes)
    include_optional: bool = False
    incompatible_licenses: set[str] = field(
        default_factory=lambda: {"GPL-3.0", "AGPL-3.0"}
    )

    def normalized_scopes(self) -> set[str]:
        scopes = {normalize_scope(s) for s in self.allowed_scopes if s and s.strip()}
        return scopes or default_scopes()

    def normalized_incompatible_set(self) -> set[str]:
        return {
            s.strip().lower() for s in self.incompatible_licenses if s and s.strip()
        }


@dataclass
class DependencyTreeOptions:
    """Options controlling dependency tree collection.

    Attributes:
        include: Enable the dependency report (disabled by default).
        depth: Maximum depth; -1 is unlimited, 0 keeps direct dependencies only.
        scopes: Scopes to include; empty means compile + runtime.
        format: Flat listing, nested tree, or both.
        exclude_transitive: Skip transitive dependencies entirely.
        include_optional: Include optional dependencies.
    """

    include: bool = False
    depth: int = -1
    scopes: set[str] = field(default_factory=set)
    format: DependencyTreeFormat = DependencyTreeFormat.FLAT
    exclude_transitive: bool = False
    include_optional: bool = False

    def normalized_scopes(self) -> set[str]:
        scopes = {normalize_scope(s) for s in self.scopes if s and s.strip()}
        return scopes or default_scopes()


DEFAULT_SENSITIVE_KEYS = frozenset(
    {
        "password",
        "secret",
        "token",
        "apikey",
        "api-key",
        "api_key",
        "credentials",
        "auth",
        "key",
    }
)


@dataclass
class PropertyOptions:
    """Options for the build-property snapshot."""

    include: bool = False
    include_system_properties: bool = True
    include_environment_variables: bool = False
    filter_sensitive_properties: bool = True
    mask_sensitive_values: bool = True
    property_exclusions: set[str] = field(default_factory=set)

    def sensitive_keys(self) -> set[str]:
        keys = set(DEFAULT_SENSITIVE_KEYS)
        keys.update(s.strip().lower() for s in self.property_exclusions if s and s.strip())
        return keys
