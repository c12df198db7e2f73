"""Session state: visited project forest and class listing caches.

A :class:`Session` owns everything that lives for the duration of a
working session, so separate sessions never share state.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from classpath_tracker.adapters import get_adapter
from classpath_tracker.cache import FileCache, read_archive_classes, read_source_classes
from classpath_tracker.config import ToolConfig
from classpath_tracker.forest import Node, collect, find_node, walk
from classpath_tracker.models import ArchiveError, ClassListing, Id, Module
from classpath_tracker.resolver import ensure_resolved
from classpath_tracker.tools import ToolInvocationError

logger = logging.getLogger(__name__)


class Session:
    """Project forest plus archive and source class caches.

    Attributes:
        config: External tool configuration.
        roots: Roots of all visited module trees.
        archive_cache: Class listings of dependency archives.
        source_cache: Class listings of source files.
    """

    def __init__(self, config: Optional[ToolConfig] = None) -> None:
        self.config = config or ToolConfig()
        self.roots: list[Node] = []
        self.archive_cache = FileCache("archive")
        self.source_cache = FileCache("source")

    def visit(self, path: Path) -> list[Node]:
        """Visit a project descriptor and add its trees to the forest.

        Trees from an earlier visit of the same descriptor are replaced.

        Args:
            path: Path to ``pom.xml`` or ``build.gradle(.kts)``.

        Returns:
            Roots produced by this visit.
        """
        adapter = get_adapter(path, self.config)
        logger.debug("Visiting %s with %s adapter", path, adapter.tool_name)
        new_roots = adapter.visit(path)

        descriptor = path.resolve()
        self.roots = [
            root for root in self.roots if root.contents.file_orig != descriptor
        ]
        self.roots.extend(new_roots)
        return new_roots

    def forget(self) -> None:
        """Drop all visited projects."""
        self.roots = []

    def flush_caches(self) -> None:
        """Clear the archive and source class caches."""
        self.archive_cache.flush()
        self.source_cache.flush()

    def modules(self) -> list[Module]:
        """Return every module of the forest in pre-order."""
        return collect(lambda module: True, self.roots)

    def find_module(self, wanted: Union[str, Id]) -> Optional[Node]:
        """Find the node of a module by artifact name or lax id match."""
        if isinstance(wanted, str):
            wanted = Id(group=None, artifact=wanted)
        return find_node(lambda module: wanted.matches(module.id), self.roots)

    def module_for_file(self, path: Path) -> Optional[Node]:
        """Find the module a file belongs to.

        A file belongs to a module if it lies under one of the module's
        source directories or its descriptor directory. The deepest
        containing directory wins.
        """
        target = Path(os.path.abspath(path))
        best: Optional[Node] = None
        best_depth = -1
        for node in walk(self.roots):
            module: Module = node.contents
            dirs = list(module.source_dirs)
            if module.file is not None:
                dirs.append(module.file.parent)
            for directory in dirs:
                directory = Path(os.path.abspath(directory))
                if target.is_relative_to(directory) and len(directory.parts) > best_depth:
                    best, best_depth = node, len(directory.parts)
        return best

    def collect_classes(
        self,
        node: Node,
        include_sources: bool = True,
        include_jdk: bool = False,
    ) -> ClassListing:
        """Collect the classes visible to a module.

        Dependency archives that cannot be read are recorded in the
        listing's errors; the remaining archives are still processed.

        Args:
            node: Node of the module.
            include_sources: Add types declared in the module's sources.
            include_jdk: Add classes of the configured JDK's ``jmods``.

        Returns:
            Class names and per-archive errors.

        Raises:
            ToolInvocationError: If resolving the module's dependencies fails.
        """
        listing = ClassListing()
        seen: set[str] = set()

        def add(names: list[str]) -> None:
            for name in names:
                if name not in seen:
                    seen.add(name)
                    listing.classes.append(name)

        archives = list(ensure_resolved(node))
        if include_jdk:
            archives.extend(self._jdk_modules())

        for archive in archives:
            try:
                add(
                    self.archive_cache.get_or_load(
                        archive, lambda p: read_archive_classes(p, self.config)
                    )
                )
            except (ToolInvocationError, OSError) as e:
                logger.warning("Could not read classes from %s: %s", archive, e)
                listing.errors.append(ArchiveError(path=archive, message=str(e)))

        if include_sources:
            for source in _java_files(node.contents):
                add(self.source_cache.get_or_load(source, read_source_classes))

        if listing.errors:
            logger.warning(
                "%d archive(s) could not be read for %s",
                len(listing.errors),
                node.contents.id,
            )
        return listing

    def _jdk_modules(self) -> list[Path]:
        if self.config.jdk_home is None:
            logger.warning("JDK classes requested but no JDK home is configured")
            return []
        jmods = self.config.jdk_home / "jmods"
        if not jmods.is_dir():
            logger.warning("No jmods directory in %s", self.config.jdk_home)
            return []
        return sorted(jmods.glob("*.jmod"))


def _java_files(module: Module) -> list[Path]:
    files = []
    for directory in module.source_dirs:
        if directory.is_dir():
            files.extend(sorted(directory.rglob("*.java")))
    return files
