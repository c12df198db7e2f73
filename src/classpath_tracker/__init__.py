"""Classpath Tracker - Maven and Gradle project structure and classpath discovery.

This package discovers multi-module JVM project structures, resolves each
module's dependency archives through the installed build tool, and lists
the classes those archives contain.
"""

__version__ = "0.1.0"
__author__ = "forkrul"

from classpath_tracker.models import (
    ArchiveError,
    CacheEntry,
    ClassListing,
    Id,
    Module,
)
from classpath_tracker.session import Session

__all__ = [
    "__version__",
    "ArchiveError",
    "CacheEntry",
    "ClassListing",
    "Id",
    "Module",
    "Session",
]
