"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from classpath_tracker.forest import Node
from classpath_tracker.models import Id, Module

# Effective POM of a root aggregator with two jar modules, wrapped in the
# log noise Maven prints around it
EFFECTIVE_POM_OUTPUT = """\
[INFO] Scanning for projects...
[INFO] ------------------------------------------------------------------------
[INFO] Reactor Build Order:
[INFO]
Effective POMs, after inheritance, interpolation, and profiles are applied:

<?xml version="1.0" encoding="UTF-8"?>
<!-- ====================================================================== -->
<projects>
  <project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>root</artifactId>
    <version>1.0</version>
    <packaging>pom</packaging>
    <modules>
      <module>child-a</module>
      <module>b/child-b</module>
    </modules>
    <build>
      <sourceDirectory>/work/src/main/java</sourceDirectory>
      <directory>/work/target</directory>
      <finalName>root-1.0</finalName>
    </build>
  </project>
  <project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
      <groupId>com.example</groupId>
      <artifactId>root</artifactId>
      <version>1.0</version>
    </parent>
    <groupId>com.example</groupId>
    <artifactId>child-a</artifactId>
    <version>1.0</version>
    <build>
      <sourceDirectory>/work/child-a/src/main/java</sourceDirectory>
      <testSourceDirectory>/work/child-a/src/test/java</testSourceDirectory>
      <directory>/work/child-a/target</directory>
      <finalName>child-a-1.0</finalName>
    </build>
  </project>
  <project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
      <groupId>com.example</groupId>
      <artifactId>root</artifactId>
      <version>1.0</version>
    </parent>
    <groupId>com.example</groupId>
    <artifactId>child-b</artifactId>
    <version>1.0</version>
    <packaging>war</packaging>
    <build>
      <directory>/work/b/child-b/target</directory>
      <finalName>child-b</finalName>
    </build>
  </project>
</projects>
[INFO] ------------------------------------------------------------------------
[INFO] BUILD SUCCESS
"""

ROOT_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>root</artifactId>
  <version>1.0</version>
  <packaging>pom</packaging>
  <modules>
    <module>child-a</module>
    <module>b/child-b</module>
  </modules>
</project>
"""

# Child descriptors inherit groupId and version from their parent
CHILD_POM = """\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>com.example</groupId>
    <artifactId>root</artifactId>
    <version>1.0</version>
  </parent>
  <artifactId>{artifact}</artifactId>
</project>
"""


@pytest.fixture
def effective_pom_output() -> str:
    """Return help:effective-pom output for the maven_project layout."""
    return EFFECTIVE_POM_OUTPUT


@pytest.fixture
def maven_project(tmp_path: Path) -> Path:
    """Create a root pom.xml with modules "child-a" and "b/child-b"."""
    (tmp_path / "pom.xml").write_text(ROOT_POM)
    for rel, artifact in (("child-a", "child-a"), ("b/child-b", "child-b")):
        directory = tmp_path / rel
        directory.mkdir(parents=True)
        (directory / "pom.xml").write_text(CHILD_POM.format(artifact=artifact))
    return tmp_path / "pom.xml"


def set_mtime(path: Path, ts: float) -> None:
    """Set both access and modification time of a file."""
    os.utime(path, (ts, ts))


@pytest.fixture
def module_tree(tmp_path: Path):
    """Build a root -> child -> grandchild tree backed by real descriptors.

    Every descriptor gets an mtime of 1000; every module is marked as
    resolved at 2000.

    Returns:
        Tuple of (root, child, grandchild) nodes.
    """
    nodes = []
    parent_id = None
    parent_node = None
    for name in ("root", "child", "grandchild"):
        directory = tmp_path / name
        directory.mkdir()
        descriptor = directory / "pom.xml"
        descriptor.write_text("<project/>")
        set_mtime(descriptor, 1000)

        module = Module(
            id=Id("com.example", name, "1.0"),
            parent_id=parent_id,
            file=descriptor,
            file_orig=descriptor,
            dep_jars=[],
            load_ts=2000,
        )
        node = Node(module)
        if parent_node is not None:
            parent_node.add_child(node)
        nodes.append(node)
        parent_id, parent_node = module.id, node
    return tuple(nodes)
