"""Adapter for Maven projects.

Maven's effective-pom report describes every project of a multi-module
build but not where each project's ``pom.xml`` lives. File locations are
recovered in a second pass that walks the ``<modules>`` declarations
starting at the visited descriptor.
"""

import logging
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from classpath_tracker.adapters.base import BaseAdapter
from classpath_tracker.forest import Node
from classpath_tracker.models import Id, Module
from classpath_tracker.tools import run_tool

logger = logging.getLogger(__name__)

# Start and end of the XML document embedded in Maven's log output
_XML_START = re.compile(r"<\?xml|<projects?[\s>]")
_XML_END = re.compile(r"</projects?>")


class MavenAdapter(BaseAdapter):
    """Adapter for ``pom.xml`` descriptors."""

    DESCRIPTOR_NAME = "pom.xml"

    CLASSPATH_MARKER = "Dependencies classpath:"

    @classmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this adapter can handle the given file.

        Returns:
            True if the file is named "pom.xml", False otherwise.
        """
        return path.name == cls.DESCRIPTOR_NAME

    @property
    def tool_name(self) -> str:
        return "Maven"

    def visit(self, path: Path) -> list[Node]:
        """Discover the Maven project structure rooted at ``path``.

        Runs ``help:effective-pom`` once, builds one module per reported
        project, then resolves module files by walking the descriptors on
        disk.

        Raises:
            FileNotFoundError: If the descriptor does not exist.
            ValueError: If the report is unusable or a module file cannot
                be located.
            ToolInvocationError: If Maven fails.
        """
        if not path.exists():
            raise FileNotFoundError(f"Maven descriptor not found: {path}")

        output = run_tool(
            self.config.maven,
            ["-B", "-f", str(path), "help:effective-pom"],
            cwd=path.parent,
        )
        modules = self.parse_effective_pom(output, path)
        logger.debug("Effective POM of %s lists %d project(s)", path, len(modules))

        self.resolve_files(path, modules)
        return self._assemble(modules, path)

    def parse_effective_pom(self, output: str, file_orig: Path) -> list[Module]:
        """Extract modules from ``help:effective-pom`` output.

        Args:
            output: Raw Maven output, log lines included.
            file_orig: Descriptor that was visited.

        Returns:
            Modules in report order, without ``file`` set.

        Raises:
            ValueError: If no XML or no project is found.
        """
        root = _parse_xml(_extract_xml(output), file_orig)
        if root.tag == "projects":
            elements = root.findall("project")
        elif root.tag == "project":
            elements = [root]
        else:
            elements = []

        if not elements:
            raise ValueError(f"Effective POM for {file_orig} contains no projects")

        return [self._module_from_element(e, file_orig) for e in elements]

    def resolve_files(self, path: Path, modules: list[Module]) -> None:
        """Assign descriptor files to modules by walking ``<modules>``.

        Args:
            path: Root descriptor.
            modules: Modules from the effective POM; updated in place.

        Raises:
            ValueError: If any module is left without a file.
        """
        self._resolve_file(path, modules, set())

        missing = [str(m.id) for m in modules if m.file is None]
        if missing:
            raise ValueError(
                f"Could not locate descriptor files under {path} for: "
                + ", ".join(missing)
            )

    def _resolve_file(
        self, path: Path, modules: list[Module], seen: set[Path]
    ) -> None:
        if not path.exists():
            logger.warning("Declared module descriptor not found: %s", path)
            return

        resolved = path.resolve()
        if resolved in seen:
            logger.warning("Module descriptor %s is declared more than once", path)
            return
        seen.add(resolved)

        root = _parse_xml(path.read_text(encoding="utf-8"), path)
        file_id = _element_id(root)

        module = next(
            (m for m in modules if m.file is None and file_id.matches(m.id)),
            None,
        )
        if module is None:
            logger.warning("No reported project matches %s (%s)", file_id, path)
        else:
            module.file = resolved

        for rel in _texts(root, "modules/module"):
            child = path.parent / rel
            if child.is_dir() or not child.suffix:
                child = child / self.DESCRIPTOR_NAME
            self._resolve_file(child, modules, seen)

    def fetch_dep_jars(self, module: Module, ids: list[Id]) -> list[Path]:
        """Run ``dependency:build-classpath`` on the module's own descriptor."""
        target = module.file or module.file_orig
        output = run_tool(
            self.config.maven,
            ["-B", "-f", str(target), "dependency:build-classpath"],
            cwd=target.parent,
        )
        return self.parse_classpath(output)

    def parse_classpath(self, output: str) -> list[Path]:
        """Return the classpath printed after the ``Dependencies classpath:`` line."""
        lines = output.splitlines()
        for i, line in enumerate(lines):
            if self.CLASSPATH_MARKER not in line:
                continue
            for candidate in lines[i + 1 :]:
                candidate = candidate.strip()
                if candidate:
                    return [Path(p) for p in candidate.split(os.pathsep) if p]
            break
        logger.debug("No dependencies in build-classpath output")
        return []

    def _module_from_element(self, element: ET.Element, file_orig: Path) -> Module:
        build_dir = _text(element, "build/directory")
        return Module(
            id=_element_id(element),
            parent_id=_parent_id(element),
            file=None,
            file_orig=file_orig.resolve(),
            final_name=_final_name(element),
            source_dirs=[
                Path(d)
                for d in (
                    _text(element, "build/sourceDirectory"),
                    _text(element, "build/testSourceDirectory"),
                )
                if d
            ],
            build_dir=Path(build_dir) if build_dir else None,
            fetcher=self.fetch_dep_jars,
        )


def _extract_xml(output: str) -> str:
    start = _XML_START.search(output)
    ends = list(_XML_END.finditer(output))
    if start is None or not ends or ends[-1].end() <= start.start():
        raise ValueError(f"No XML found in Maven output:\n{output}")
    return output[start.start() : ends[-1].end()]


def _parse_xml(text: str, source: Path) -> ET.Element:
    """Parse POM XML and strip namespaces from tags."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML for {source}: {e}") from e

    for element in root.iter():
        if isinstance(element.tag, str) and element.tag.startswith("{"):
            element.tag = element.tag.split("}", 1)[1]
    return root


def _text(element: ET.Element, path: str) -> Optional[str]:
    found = element.find(path)
    if found is None or found.text is None:
        return None
    return found.text.strip() or None


def _texts(element: ET.Element, path: str) -> list[str]:
    return [e.text.strip() for e in element.findall(path) if e.text and e.text.strip()]


def _element_id(element: ET.Element) -> Id:
    artifact = _text(element, "artifactId")
    if artifact is None:
        raise ValueError("Project without artifactId")
    # groupId and version are inherited from <parent> when omitted
    return Id(
        group=_text(element, "groupId") or _text(element, "parent/groupId"),
        artifact=artifact,
        version=_text(element, "version") or _text(element, "parent/version"),
    )


def _parent_id(element: ET.Element) -> Optional[Id]:
    artifact = _text(element, "parent/artifactId")
    if artifact is None:
        return None
    return Id(
        group=_text(element, "parent/groupId"),
        artifact=artifact,
        version=_text(element, "parent/version"),
    )


def _final_name(element: ET.Element) -> Optional[str]:
    packaging = _text(element, "packaging") or "jar"
    name = _text(element, "build/finalName")
    if name is None or packaging == "pom":
        return None
    return f"{name}.{packaging}"
