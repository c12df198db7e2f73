"""Core data models for classpath_tracker.

This module defines the normalized entities that both build tool adapters
populate: build coordinates, modules, and the cache entries used for
class listings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Id:
    """Build coordinate of a module.

    Frozen for hashability. Group and version may be absent when a child
    descriptor inherits them from its parent.

    Attributes:
        group: Group identifier (e.g., "org.example"), or None.
        artifact: Artifact name (e.g., "core"). Always present.
        version: Version string (e.g., "1.0.0"), or None.
    """

    group: Optional[str]
    artifact: str
    version: Optional[str] = None

    def matches(self, other: "Id") -> bool:
        """Compare two ids laxly.

        Artifacts must be equal. Group and version only have to be equal
        when both sides carry a value.

        Args:
            other: Id to compare with.

        Returns:
            True if the ids match, False otherwise.
        """
        if self.artifact != other.artifact:
            return False
        if self.group and other.group and self.group != other.group:
            return False
        if self.version and other.version and self.version != other.version:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.group or ''}:{self.artifact}:{self.version or ''}"


# Signature of the adapter routine that re-fetches a module's dependencies.
# Receives the module and the ids of its ancestors, root first.
Fetcher = Callable[["Module", list[Id]], list[Path]]


@dataclass
class Module:
    """A project unit discovered in a build description.

    Attributes:
        id: Coordinate of the module.
        parent_id: Coordinate of the parent module, None for a root.
        file: Canonical descriptor path. Maven sets it in a second pass.
        file_orig: Descriptor the user visited; used to re-invoke the tool.
        final_name: File name of the produced archive, None if there is none.
        source_dirs: Source directories in declaration order.
        build_dir: Build output directory.
        dep_jars: Dependency archives, None until first resolved.
        load_ts: Epoch seconds of the last resolution, None until resolved.
        fetcher: Adapter routine returning fresh dependency archives.
    """

    id: Id
    parent_id: Optional[Id] = None
    file: Optional[Path] = None
    file_orig: Optional[Path] = None
    final_name: Optional[str] = None
    source_dirs: list[Path] = field(default_factory=list)
    build_dir: Optional[Path] = None
    dep_jars: Optional[list[Path]] = None
    load_ts: Optional[float] = None
    fetcher: Optional[Fetcher] = field(default=None, repr=False, compare=False)

    @property
    def final_archive(self) -> Optional[Path]:
        """Return the path of the produced archive if known."""
        if self.final_name is None or self.build_dir is None:
            return None
        return self.build_dir / self.final_name


@dataclass
class CacheEntry:
    """Value read from a file, stamped with the time of the read.

    Attributes:
        file: Absolute path of the file the value was read from.
        read_ts: Epoch seconds when the file was read.
        value: Loaded payload (e.g., a list of class names).
    """

    file: Path
    read_ts: float
    value: Any


@dataclass
class ArchiveError:
    """A dependency archive whose classes could not be read."""

    path: Path
    message: str


@dataclass
class ClassListing:
    """Result of collecting the classes visible to a module.

    Attributes:
        classes: Fully qualified class names, first occurrence order.
        errors: Archives that failed to load; reported separately.
    """

    classes: list[str] = field(default_factory=list)
    errors: list[ArchiveError] = field(default_factory=list)
