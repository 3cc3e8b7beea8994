from deploy_manifest.models import (
    Coordinate,
    DependencyDeclaration,
    LicenseOptions,
    Manifest,
    ParentRef,
    normalize_scope,
)


def test_coordinate_key_is_colon_joined():
    """Test that the identity key joins group, artifact and version."""
    coordinate = Coordinate("org.example", "lib", "1.0")
    assert coordinate.key == "org.example:lib:1.0"
    assert coordinate.ga == "org.example:lib"
    assert str(coordinate) == "org.example:lib:1.0"


def test_coordinate_equality_is_exact():
    """Test that versions are compared verbatim, without normalization."""
    assert Coordinate("g", "a", "1.0") == Coordinate("g", "a", "1.0")
    assert Coordinate("g", "a", "1.0") != Coordinate("g", "a", "1.0.0")


def test_normalize_scope_defaults_to_compile():
    """Test that blank or missing scopes normalize to compile."""
    assert normalize_scope(None) == "compile"
    assert normalize_scope("   ") == "compile"
    assert normalize_scope(" Runtime ") == "runtime"


def test_bom_import_detection():
    """Test that only type=pom + scope=import marks a BOM import."""
    assert DependencyDeclaration("g", "bom", "1", scope="IMPORT", type="pom").is_bom_import
    assert not DependencyDeclaration("g", "bom", "1", scope="import").is_bom_import
    assert not DependencyDeclaration("g", "bom", "1", type="pom").is_bom_import


def test_manifest_effective_coordinate_falls_back_to_parent():
    """Test that group and version are inherited from the parent reference."""
    manifest = Manifest(
        artifact_id="child",
        parent=ParentRef("org.example", "parent", "2.0"),
    )
    assert manifest.coordinate == Coordinate("org.example", "child", "2.0")


def test_license_options_normalize_sets():
    """Test that scope and incompatible sets are normalized."""
    options = LicenseOptions(
        allowed_scopes={" Compile ", ""},
        incompatible_licenses={"GPL-3.0", " AGPL-3.0 "},
    )
    assert options.normalized_scopes() == {"compile"}
    assert options.normalized_incompatible_set() == {"gpl-3.0", "agpl-3.0"}


def test_license_options_empty_scopes_fall_back_to_defaults():
    """Test that an empty scope set means compile + runtime."""
    assert LicenseOptions(allowed_scopes=set()).normalized_scopes() == {
        "compile",
        "runtime",
    }
