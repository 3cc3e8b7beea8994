"""Tests for the PomScanner."""

from pathlib import Path

import pytest

from deploy_manifest.models import Coordinate, ParentRef
from deploy_manifest.scanners import get_scanner
from deploy_manifest.scanners.pom import PomScanner

FULL_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>com.example</groupId>
    <artifactId>platform</artifactId>
    <version>3.0</version>
    <relativePath>../platform</relativePath>
  </parent>
  <artifactId>service</artifactId>
  <packaging>war</packaging>
  <name>Example Service</name>
  <properties>
    <jackson.version>2.17.0</jackson.version>
    <db.password>hunter2</db.password>
  </properties>
  <licenses>
    <license>
      <name>Apache-2.0</name>
      <url>https://www.apache.org/licenses/LICENSE-2.0</url>
    </license>
  </licenses>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>com.example</groupId>
        <artifactId>bom</artifactId>
        <version>1.0</version>
        <type>pom</type>
        <scope>import</scope>
      </dependency>
    </dependencies>
  </dependencyManagement>
  <dependencies>
    <dependency>
      <groupId>com.fasterxml.jackson.core</groupId>
      <artifactId>jackson-databind</artifactId>
      <version>${jackson.version}</version>
    </dependency>
    <dependency>
      <groupId>org.junit.jupiter</groupId>
      <artifactId>junit-jupiter</artifactId>
      <scope>test</scope>
      <optional>true</optional>
    </dependency>
  </dependencies>
  <profiles>
    <profile>
      <id>dev</id>
      <activation><activeByDefault>true</activeByDefault></activation>
    </profile>
    <profile><id>release</id></profile>
  </profiles>
</project>
"""


class TestPomScanner:
    """Test suite for PomScanner."""

    @pytest.fixture
    def pom_path(self, tmp_path: Path) -> Path:
        """Write the sample POM to a temporary module directory."""
        path = tmp_path / "service" / "pom.xml"
        path.parent.mkdir()
        path.write_text(FULL_POM, encoding="utf-8")
        return path

    @pytest.fixture
    def scanner(self, pom_path: Path) -> PomScanner:
        """Create a PomScanner instance."""
        return PomScanner(source_path=pom_path)

    def test_can_handle_pom_files(self):
        """Test that can_handle accepts module and repository POMs."""
        assert PomScanner.can_handle(Path("pom.xml"))
        assert PomScanner.can_handle(Path("effective-pom.xml"))
        assert PomScanner.can_handle(Path("commons-lang3-3.14.0.pom"))

    def test_can_handle_rejects_other_files(self):
        """Test that can_handle returns False for non-POM files."""
        assert not PomScanner.can_handle(Path("build.gradle"))
        assert not PomScanner.can_handle(Path("poetry.lock"))
        assert not PomScanner.can_handle(Path("settings.xml"))

    def test_source_name(self, scanner: PomScanner):
        """Test that source_name returns the correct value."""
        assert scanner.source_name == "pom.xml"

    def test_scan_coordinates_inherit_from_parent(self, scanner: PomScanner):
        """Test that missing groupId and version come from the parent."""
        manifest = scanner.scan()

        assert manifest.group_id == ""
        assert manifest.version == ""
        assert manifest.coordinate == Coordinate("com.example", "service", "3.0")
        assert manifest.packaging == "war"
        assert manifest.name == "Example Service"

    def test_scan_parent_reference(self, scanner: PomScanner):
        """Test parsing of the parent element, including relativePath."""
        manifest = scanner.scan()
        assert manifest.parent == ParentRef(
            "com.example", "platform", "3.0", relative_path="../platform"
        )

    def test_scan_sets_path(self, scanner: PomScanner, pom_path: Path):
        """Test that the manifest remembers where it was read from."""
        manifest = scanner.scan()
        assert manifest.path == pom_path
        assert manifest.module_dir == pom_path.parent

    def test_scan_properties_keep_placeholders(self, scanner: PomScanner):
        """Test that declared values are returned verbatim."""
        manifest = scanner.scan()

        assert manifest.properties == {
            "jackson.version": "2.17.0",
            "db.password": "hunter2",
        }
        assert manifest.dependencies[0].version == "${jackson.version}"

    def test_scan_dependencies(self, scanner: PomScanner):
        """Test parsing of scopes, types and the optional flag."""
        databind, junit = scanner.scan().dependencies

        assert databind.scope == ""
        assert databind.normalized_scope == "compile"
        assert databind.type == "jar"
        assert not databind.optional

        assert junit.version == ""
        assert junit.normalized_scope == "test"
        assert junit.optional

    def test_scan_managed_dependencies(self, scanner: PomScanner):
        """Test that dependencyManagement entries are kept apart."""
        managed = scanner.scan().managed_dependencies

        assert len(managed) == 1
        assert managed[0].is_bom_import

    def test_scan_licenses_and_profiles(self, scanner: PomScanner):
        """Test parsing of licenses and profile activation."""
        manifest = scanner.scan()

        assert [lic.name for lic in manifest.licenses] == ["Apache-2.0"]
        assert manifest.licenses[0].url == "https://www.apache.org/licenses/LICENSE-2.0"
        assert [p.id for p in manifest.profiles] == ["dev", "release"]
        assert manifest.profiles[0].active_by_default
        assert not manifest.profiles[1].active_by_default

    def test_scan_without_namespace(self, tmp_path: Path):
        """Test that namespace-less documents parse the same way."""
        path = tmp_path / "pom.xml"
        path.write_text(
            "<project><groupId>g</groupId><artifactId>a</artifactId>"
            "<version>1</version></project>"
        )

        manifest = PomScanner(path).scan()

        assert manifest.coordinate == Coordinate("g", "a", "1")
        assert manifest.parent is None

    def test_empty_relative_path_is_kept(self, tmp_path: Path, pom):
        """Test that an empty relativePath differs from an absent one."""
        path = tmp_path / "pom.xml"
        path.write_text(pom("g", "a", "1", parent=("g", "p", "1"), relative_path=""))

        assert PomScanner(path).scan().parent.relative_path == ""

    def test_scan_missing_file(self, tmp_path: Path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            PomScanner(tmp_path / "pom.xml").scan()

    def test_scan_invalid_xml(self, tmp_path: Path):
        """Test that malformed XML raises ValueError."""
        path = tmp_path / "pom.xml"
        path.write_text("<project><artifactId>broken</project>")

        with pytest.raises(ValueError, match="Invalid XML"):
            PomScanner(path).scan()

    def test_scan_unknown_encoding(self, tmp_path: Path):
        """Test that an unsupported declared encoding raises ValueError."""
        path = tmp_path / "pom.xml"
        path.write_text('<?xml version="1.0" encoding="bogus-enc"?><project/>')

        with pytest.raises(ValueError, match="Invalid XML"):
            PomScanner(path).scan()

    def test_scan_wrong_root_element(self, tmp_path: Path):
        """Test that a non-project document is rejected."""
        path = tmp_path / "pom.xml"
        path.write_text("<settings><localRepository>/tmp</localRepository></settings>")

        with pytest.raises(ValueError, match="<project>"):
            PomScanner(path).scan()

    def test_scan_without_source_path(self):
        """Test that scanning without a path raises ValueError."""
        with pytest.raises(ValueError):
            PomScanner().scan()


def test_get_scanner_returns_pom_scanner(tmp_path: Path):
    """Test scanner lookup by file name."""
    assert isinstance(get_scanner(tmp_path / "pom.xml"), PomScanner)


def test_get_scanner_rejects_unknown_files(tmp_path: Path):
    """Test that unsupported manifests raise ValueError."""
    with pytest.raises(ValueError):
        get_scanner(tmp_path / "build.gradle")
