"""Pytest configuration and fixtures.

Most tests build a throw-away local repository under ``tmp_path`` and write
small POM files into it (and into module directories next to it).
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from deploy_manifest.resolvers import ResolverContext
from deploy_manifest.store import ManifestStore

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


def dependency_xml(
    group_id: str,
    artifact_id: str,
    version: Optional[str] = None,
    scope: Optional[str] = None,
    type: Optional[str] = None,
    optional: bool = False,
) -> str:
    """Return a ``<dependency>`` element."""
    xml = f"<dependency><groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
    if version is not None:
        xml += f"<version>{version}</version>"
    if type is not None:
        xml += f"<type>{type}</type>"
    if scope is not None:
        xml += f"<scope>{scope}</scope>"
    if optional:
        xml += "<optional>true</optional>"
    return xml + "</dependency>\n"


def pom_xml(
    group_id: Optional[str],
    artifact_id: str,
    version: Optional[str],
    inner: str = "",
    parent: Optional[tuple[str, str, str]] = None,
    relative_path: Optional[str] = None,
) -> str:
    """Return a complete POM document."""
    parts = [
        f'<project xmlns="{POM_NAMESPACE}">\n',
        "  <modelVersion>4.0.0</modelVersion>\n",
    ]
    if parent is not None:
        parts.append(
            "  <parent>"
            f"<groupId>{parent[0]}</groupId>"
            f"<artifactId>{parent[1]}</artifactId>"
            f"<version>{parent[2]}</version>"
        )
        if relative_path is not None:
            parts.append(f"<relativePath>{relative_path}</relativePath>")
        parts.append("</parent>\n")
    if group_id is not None:
        parts.append(f"  <groupId>{group_id}</groupId>\n")
    parts.append(f"  <artifactId>{artifact_id}</artifactId>\n")
    if version is not None:
        parts.append(f"  <version>{version}</version>\n")
    parts.append(inner)
    parts.append("\n</project>\n")
    return "".join(parts)


def licenses_xml(*names: str) -> str:
    """Return a ``<licenses>`` block with one entry per name."""
    entries = "".join(
        f"<license><name>{name}</name><url>https://licenses.example/{name}</url></license>"
        for name in names
    )
    return f"<licenses>{entries}</licenses>\n"


def dependencies_xml(*deps: str) -> str:
    return f"<dependencies>\n{''.join(deps)}</dependencies>\n"


def managed_xml(*deps: str) -> str:
    return f"<dependencyManagement>{dependencies_xml(*deps)}</dependencyManagement>\n"


def properties_xml(**values: str) -> str:
    body = "".join(f"<{k}>{v}</{k}>" for k, v in values.items())
    return f"<properties>{body}</properties>\n"


@pytest.fixture
def pom() -> Callable[..., str]:
    """Return the POM document builder."""
    return pom_xml


@pytest.fixture
def dep() -> Callable[..., str]:
    """Return the ``<dependency>`` element builder."""
    return dependency_xml


@pytest.fixture
def xml() -> dict[str, Callable[..., str]]:
    """Return builders for the remaining POM sections."""
    return {
        "licenses": licenses_xml,
        "dependencies": dependencies_xml,
        "managed": managed_xml,
        "properties": properties_xml,
    }


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Create an empty local repository."""
    root = tmp_path / "m2repo"
    root.mkdir()
    return root


@pytest.fixture
def store(repo: Path) -> ManifestStore:
    """Return a store reading from the temporary repository."""
    return ManifestStore(repo)


@pytest.fixture
def context(store: ManifestStore) -> ResolverContext:
    """Return a fresh resolution context over the temporary repository."""
    return ResolverContext(store)


@pytest.fixture
def write_repo_pom(repo: Path) -> Callable[..., Path]:
    """Return a function writing a POM into the temporary repository."""

    def _write(group_id: str, artifact_id: str, version: str, inner: str = "", **kwargs) -> Path:
        directory = repo.joinpath(*group_id.split("."), artifact_id, version)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{artifact_id}-{version}.pom"
        path.write_text(
            pom_xml(group_id, artifact_id, version, inner, **kwargs), encoding="utf-8"
        )
        return path

    return _write


@pytest.fixture
def write_module_pom(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing ``<relative dir>/pom.xml`` under a workspace."""
    workspace = tmp_path / "workspace"

    def _write(
        relative_dir: str,
        group_id: Optional[str],
        artifact_id: str,
        version: Optional[str],
        inner: str = "",
        **kwargs,
    ) -> Path:
        directory = workspace / relative_dir if relative_dir else workspace
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "pom.xml"
        path.write_text(
            pom_xml(group_id, artifact_id, version, inner, **kwargs), encoding="utf-8"
        )
        return path

    return _write
