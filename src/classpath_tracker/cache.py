"""In-memory cache of values read from files, validated by modification time.

This module provides the cache used for class listings of dependency
archives and source files, together with the loaders that produce those
listings.
"""

import logging
import os
import re
import time
from pathlib import Path
from typing import Any, Callable, Optional

from classpath_tracker.config import ToolConfig
from classpath_tracker.models import CacheEntry
from classpath_tracker.tools import run_tool

logger = logging.getLogger(__name__)

Loader = Callable[[Path], Any]

# Directory marker in front of entries listed by ``jmod list``
CLASSES_MARKER = "classes/"

# Anonymous and local classes generated by the compiler (Foo$1, Foo$1Local)
SYNTHETIC_CLASS_PATTERN = re.compile(r"\$\d")

PSEUDO_CLASSES = ("module-info", "package-info")


def get_or_load(path: Path, mapping: dict[Path, CacheEntry], loader: Loader) -> Any:
    """Return the value cached for a file, loading it when needed.

    The loader runs if there is no entry for ``path`` or the file has been
    modified after the entry was read.

    Args:
        path: File to read.
        mapping: Cache mapping to look up and update.
        loader: Callable producing the value for a path.

    Returns:
        Cached or freshly loaded value.

    Raises:
        Exception: Whatever the loader raises, including for a missing file.
    """
    key = Path(os.path.abspath(path))
    entry = mapping.get(key)

    try:
        mtime: Optional[float] = os.path.getmtime(key)
    except FileNotFoundError:
        mtime = None
        mapping.pop(key, None)
        entry = None

    if entry is not None and mtime is not None and mtime <= entry.read_ts:
        return entry.value

    read_ts = time.time()
    value = loader(key)
    mapping[key] = CacheEntry(file=key, read_ts=read_ts, value=value)
    return value


class FileCache:
    """Timestamp-validated cache for one kind of file.

    Attributes:
        name: Label used in log messages.
    """

    def __init__(self, name: str = "files") -> None:
        self.name = name
        self._entries: dict[Path, CacheEntry] = {}

    def get_or_load(self, path: Path, loader: Loader) -> Any:
        """Return the cached value for ``path``; see :func:`get_or_load`."""
        return get_or_load(path, self._entries, loader)

    def flush(self) -> None:
        """Drop every entry."""
        logger.debug("Flushing %d %s cache entries", len(self._entries), self.name)
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return Path(os.path.abspath(path)) in self._entries


def normalize_entries(lines: list[str]) -> list[str]:
    """Turn archive listing lines into fully qualified class names.

    Keeps ``.class`` entries, drops the ``classes/`` marker, module and
    package descriptors, and compiler-generated anonymous classes. Path and
    nested-class separators become dots.

    Examples:
        ``com/foo/Bar$Inner.class`` -> ``com.foo.Bar.Inner``
    """
    classes = []
    for line in lines:
        entry = line.strip()
        if not entry.endswith(".class"):
            continue
        if entry.startswith(CLASSES_MARKER):
            entry = entry[len(CLASSES_MARKER) :]
        entry = entry[: -len(".class")]

        if entry.rsplit("/", 1)[-1] in PSEUDO_CLASSES:
            continue
        if SYNTHETIC_CLASS_PATTERN.search(entry):
            continue
        classes.append(entry.replace("/", ".").replace("$", "."))
    return classes


def read_archive_classes(path: Path, config: Optional[ToolConfig] = None) -> list[str]:
    """List the classes of a ``.jar`` or ``.jmod`` archive.

    Raises:
        ToolInvocationError: If the listing tool fails.
    """
    config = config or ToolConfig()
    if path.suffix == ".jmod":
        output = run_tool(config.jmod, ["list", str(path)])
    else:
        output = run_tool(config.jar, ["tf", str(path)])
    classes = normalize_entries(output.splitlines())
    logger.debug("Read %d classes from %s", len(classes), path)
    return classes


PACKAGE_PATTERN = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
TYPE_PATTERN = re.compile(
    r"^(?:@(?!interface\b)[\w.]+(?:\([^)]*\))?\s*"
    r"|public\s+|protected\s+|private\s+|abstract\s+|final\s+|static\s+"
    r"|sealed\s+|non-sealed\s+|strictfp\s+)*"
    r"(?:class|interface|enum|record|@interface)\s+(\w+)",
    re.MULTILINE,
)


def read_source_classes(path: Path) -> list[str]:
    """List the top-level types declared in a Java source file.

    Only unindented declarations are considered top-level.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    match = PACKAGE_PATTERN.search(text)
    package = match.group(1) if match else ""
    return [
        f"{package}.{name}" if package else name
        for name in TYPE_PATTERN.findall(text)
    ]
