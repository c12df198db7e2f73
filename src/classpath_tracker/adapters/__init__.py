"""Build tool adapters.

This module provides adapters that turn Maven and Gradle project
descriptors into module forests.
"""

from pathlib import Path
from typing import Optional

from classpath_tracker.adapters.base import BaseAdapter
from classpath_tracker.adapters.gradle import GradleAdapter
from classpath_tracker.adapters.maven import MavenAdapter
from classpath_tracker.config import ToolConfig

__all__ = [
    "BaseAdapter",
    "GradleAdapter",
    "MavenAdapter",
    "get_adapter",
]

# Registry of available adapters in priority order
_ADAPTERS: list[type[BaseAdapter]] = [
    MavenAdapter,
    GradleAdapter,
]


def get_adapter(path: Path, config: Optional[ToolConfig] = None) -> BaseAdapter:
    """Get the appropriate adapter for a project descriptor.

    Args:
        path: Path to the descriptor file.
        config: Optional tool configuration passed to the adapter.

    Returns:
        Adapter instance for the descriptor's build tool.

    Raises:
        ValueError: If no adapter can handle the given file.
    """
    for adapter_cls in _ADAPTERS:
        if adapter_cls.can_handle(path):
            return adapter_cls(config)

    raise ValueError(
        f"No build tool adapter available for '{path.name}'. "
        f"Supported files: pom.xml, build.gradle, build.gradle.kts"
    )
