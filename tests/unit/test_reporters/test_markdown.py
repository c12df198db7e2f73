"""Tests for the Markdown reporter."""

from pathlib import Path

import pytest

from classpath_tracker.adapters.gradle import parse_id
from classpath_tracker.forest import Node
from classpath_tracker.models import Id, Module
from classpath_tracker.reporters.markdown import MarkdownReporter


@pytest.fixture
def forest():
    """Parent aggregator with one module that has sources and one without."""
    root = Node(Module(id=Id("com.example", "parent", "1.0"), file=Path("/w/pom.xml")))
    core = Node(
        Module(
            id=Id("com.example", "core", "1.0"),
            file=Path("/w/core/pom.xml"),
            final_name="core-1.0.jar",
            source_dirs=[Path("/w/core/src/main/java")],
            dep_jars=[Path("/m2/a.jar"), Path("/m2/b.jar")],
        )
    )
    docs = Node(Module(id=Id("com.example", "docs", "1.0")))
    root.add_child(core)
    root.add_child(docs)
    return [root]


def test_rows_follow_tree_order(forest):
    rows = MarkdownReporter().rows(forest)
    assert [(r.artifact, r.depth) for r in rows] == [
        ("parent", 0),
        ("core", 1),
        ("docs", 1),
    ]
    assert rows[1].dependency_count == 2
    assert rows[2].dependency_count is None


def test_sources_only_prunes_empty_branches(forest):
    rows = MarkdownReporter(sources_only=True).rows(forest)
    assert [r.artifact for r in rows] == ["parent", "core"]


def test_render_lists_modules(forest):
    output = MarkdownReporter().render(forest)
    assert "# Project Modules" in output
    assert "**core** `com.example:core:1.0`" in output
    assert "produces `core-1.0.jar`" in output
    assert "2 dependencies" in output
    assert "Sources: `/w/core/src/main/java`" in output


def test_render_keeps_gradle_root_name():
    """Test that coordinates are written verbatim into code spans."""
    roots = [Node(Module(id=parse_id("com.x;:;1.0"), file=Path("/w/R&D/build.gradle")))]
    output = MarkdownReporter().render(roots)
    assert "**<root>** `com.x:<root>:1.0`" in output
    assert "/w/R&D/build.gradle" in output
    assert "&lt;" not in output
    assert "&amp;" not in output


def test_custom_template(tmp_path, forest):
    template = tmp_path / "custom.md.j2"
    template.write_text("{% for m in modules %}{{ m.artifact }};{% endfor %}")
    output = MarkdownReporter(template_path=template).render(forest)
    assert output == "parent;core;docs;"


def test_write_creates_file(tmp_path, forest):
    output_path = tmp_path / "modules.md"
    MarkdownReporter().write(forest, output_path)
    assert "core" in output_path.read_text(encoding="utf-8")


def test_format_properties():
    reporter = MarkdownReporter()
    assert reporter.format_name == "markdown"
    assert reporter.default_extension == ".md"
