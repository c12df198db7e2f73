from pathlib import Path

from classpath_tracker.models import Id, Module


def test_id_matches_itself():
    """Test that lax matching is reflexive."""
    ident = Id("com.example", "core", "1.0")
    assert ident.matches(ident)


def test_id_matches_missing_group_and_version():
    """Test that absent fields on either side act as wildcards."""
    full = Id("com.example", "core", "1.0")
    bare = Id(None, "core", None)
    assert full.matches(bare)
    assert bare.matches(full)


def test_id_differing_groups_do_not_match():
    """Test that two present, different groups prevent a match."""
    assert not Id("com.a", "core", "1.0").matches(Id("com.b", "core", "1.0"))


def test_id_differing_versions_do_not_match():
    """Test that two present, different versions prevent a match."""
    assert not Id("com.a", "core", "1.0").matches(Id("com.a", "core", "2.0"))


def test_id_differing_artifacts_do_not_match():
    """Test that artifacts always have to be equal."""
    assert not Id(None, "core", None).matches(Id(None, "api", None))


def test_id_str_leaves_absent_fields_empty():
    """Test the group:artifact:version rendering."""
    assert str(Id("com.a", "core", "1.0")) == "com.a:core:1.0"
    assert str(Id(None, "core", None)) == ":core:"


def test_module_final_archive():
    """Test that final_archive joins build_dir and final_name."""
    module = Module(
        id=Id(None, "core"),
        final_name="core-1.0.jar",
        build_dir=Path("/work/target"),
    )
    assert module.final_archive == Path("/work/target/core-1.0.jar")


def test_module_final_archive_without_name():
    """Test that final_archive is None for modules producing nothing."""
    module = Module(id=Id(None, "parent"), build_dir=Path("/work/target"))
    assert module.final_archive is None


def test_module_equality_ignores_fetcher():
    """Test that the fetcher does not take part in equality."""
    first = Module(id=Id(None, "core"), fetcher=lambda m, ids: [])
    second = Module(id=Id(None, "core"))
    assert first == second
