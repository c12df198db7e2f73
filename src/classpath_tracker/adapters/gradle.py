"""Adapter for Gradle projects.

Gradle is run with a bundled init script that registers a task printing
one ``key=value`` record per project. The records already contain file
locations, directories and the dependency classpath, so no second pass
is needed.
"""

import logging
import os
import time
from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

from classpath_tracker.adapters.base import BaseAdapter
from classpath_tracker.forest import Node
from classpath_tracker.models import Id, Module
from classpath_tracker.tools import run_tool

logger = logging.getLogger(__name__)

# Artifact name given to the root project, whose Gradle path is ":"
ROOT_ARTIFACT = "<root>"


class GradleAdapter(BaseAdapter):
    """Adapter for ``build.gradle`` and ``build.gradle.kts`` descriptors."""

    DESCRIPTOR_NAMES = ("build.gradle", "build.gradle.kts")
    INIT_SCRIPT = "classpath-tracker.gradle"
    TASK_NAME = "classpathTrackerInfo"

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this adapter can handle the given file.

        Returns:
            True for "build.gradle" and "build.gradle.kts", False otherwise.
        """
        return path.name in cls.DESCRIPTOR_NAMES

    @property
    def tool_name(self) -> str:
        return "Gradle"

    def visit(self, path: Path) -> list[Node]:
        """Discover the Gradle project structure rooted at ``path``.

        Raises:
            FileNotFoundError: If the descriptor does not exist.
            ValueError: If the output holds no records or a malformed id.
            ToolInvocationError: If Gradle fails.
        """
        if not path.exists():
            raise FileNotFoundError(f"Gradle descriptor not found: {path}")

        load_ts = time.time()
        output = self._invoke(path, self.TASK_NAME)
        modules = [
            self._module_from_record(record, path, load_ts)
            for record in parse_records(output)
        ]
        logger.debug("Gradle reported %d project(s) for %s", len(modules), path)
        return self._assemble(modules, path)

    def fetch_dep_jars(self, module: Module, ids: list[Id]) -> list[Path]:
        """Re-run the info task scoped to the module's project path."""
        project_path = build_project_path([*ids, module.id])
        task = f"{project_path}:{self.TASK_NAME}" if project_path else self.TASK_NAME
        output = self._invoke(module.file_orig or module.file, task)

        records = parse_records(output)
        record = next(
            (r for r in records if parse_id(r["id"]).matches(module.id)),
            None,
        )
        if record is None:
            raise ValueError(f"Gradle did not report project {module.id}")
        return _split_paths(record.get("dep-jars"))

    def _invoke(self, path: Path, task: str) -> str:
        resource = files("classpath_tracker.adapters").joinpath(self.INIT_SCRIPT)
        with as_file(resource) as script:
            return run_tool(
                self.config.gradle,
                ["-q", "-I", str(script), "-p", str(path.parent), task],
                cwd=path.parent,
            )

    def _module_from_record(
        self, record: dict[str, str], file_orig: Path, load_ts: float
    ) -> Module:
        parent = record.get("parent-id")
        build_dir = record.get("build-dir")
        return Module(
            id=parse_id(record["id"]),
            parent_id=parse_id(parent) if parent else None,
            file=Path(record["file"]) if record.get("file") else None,
            file_orig=file_orig.resolve(),
            final_name=record.get("final-name") or None,
            source_dirs=_split_paths(record.get("source-dirs")),
            build_dir=Path(build_dir) if build_dir else None,
            dep_jars=_split_paths(record.get("dep-jars")),
            load_ts=load_ts,
            fetcher=self.fetch_dep_jars,
        )


def parse_records(output: str) -> list[dict[str, str]]:
    """Split init script output into records.

    Every ``id`` key starts a new record. Lines without ``=`` and keys
    seen before the first ``id`` are ignored.
    """
    records: list[dict[str, str]] = []
    current: Optional[dict[str, str]] = None
    for line in output.splitlines():
        line = line.strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key == "id":
            current = {}
            records.append(current)
        if current is not None:
            current[key] = value
    return records


def parse_id(text: str) -> Id:
    """Parse a ``group;path;version`` coordinate printed by the init script.

    The project path is turned into a dotted artifact name (``:a:b`` ->
    ``a.b``); the root path ``:`` becomes :data:`ROOT_ARTIFACT`.

    Raises:
        ValueError: If the text does not hold exactly three fields.
    """
    parts = text.split(";")
    if len(parts) != 3:
        raise ValueError(f"Invalid Gradle project id: {text!r}")
    group, path, version = (p.strip() for p in parts)

    if path == ":":
        artifact = ROOT_ARTIFACT
    else:
        artifact = path.lstrip(":").replace(":", ".")
    if not artifact:
        raise ValueError(f"Invalid Gradle project id: {text!r}")

    return Id(
        group=group or None,
        artifact=artifact,
        version=None if version in ("", "unspecified") else version,
    )


def build_project_path(ids: list[Id]) -> str:
    """Rebuild a Gradle project path from an id chain, root first.

    A ``<root>`` first id contributes nothing. Any other first id is a
    subproject visited directly, and its dotted artifact expands to its
    full path. Every later artifact contributes what is left after
    removing its parent's artifact name.

    Returns:
        Path like ``:sub:proj``, or "" for the root project.
    """
    if not ids:
        return ""
    first = ids[0].artifact
    if first == ROOT_ARTIFACT:
        segments = []
        prefix = ""
    else:
        segments = first.split(".")
        prefix = first
    for ident in ids[1:]:
        name = ident.artifact
        if prefix and name.startswith(prefix + "."):
            name = name[len(prefix) + 1 :]
        segments.append(name)
        prefix = ident.artifact
    return ":" + ":".join(segments) if segments else ""


def _split_paths(value: Optional[str]) -> list[Path]:
    if not value:
        return []
    return [Path(p) for p in value.split(os.pathsep) if p]
