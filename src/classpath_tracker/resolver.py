"""Lazy dependency resolution with ancestor-aware staleness checks.

A module's dependency list is fetched from the build tool on first use
and again whenever its own descriptor or any ancestor's descriptor has
been modified since the last fetch.
"""

import logging
import os
import time
from pathlib import Path

from classpath_tracker.forest import Node
from classpath_tracker.models import Id, Module

logger = logging.getLogger(__name__)


def ancestor_ids(node: Node) -> list[Id]:
    """Return the ids of a node's ancestors, root first, excluding the node."""
    ids = [ancestor.contents.id for ancestor in node.ancestors()]
    ids.reverse()
    return ids


def is_stale(node: Node) -> bool:
    """Check whether a module's dependency list must be fetched again.

    Args:
        node: Node holding the module.

    Returns:
        True if the module was never resolved, or if the descriptor of the
        module or of any ancestor changed after the last resolution.
    """
    module: Module = node.contents
    if module.dep_jars is None or module.load_ts is None:
        return True

    for ancestor in node.ancestors(include_self=True):
        for path in _descriptors(ancestor.contents):
            try:
                mtime = os.path.getmtime(path)
            except FileNotFoundError:
                logger.debug("Descriptor %s vanished, treating as stale", path)
                return True
            if mtime > module.load_ts:
                logger.debug("%s changed since last resolution of %s", path, module.id)
                return True
    return False


def ensure_resolved(node: Node) -> list[Path]:
    """Make sure the module's dependency list is current.

    Calls the module's fetcher when :func:`is_stale` says so; otherwise
    does nothing. Errors raised by the fetcher propagate and leave the
    module unchanged.

    Args:
        node: Node holding the module.

    Returns:
        The module's dependency archives.

    Raises:
        ValueError: If the module has no fetcher.
    """
    module: Module = node.contents
    if not is_stale(node):
        return module.dep_jars

    if module.fetcher is None:
        raise ValueError(f"No dependency fetcher for module {module.id}")

    logger.debug("Resolving dependencies of %s", module.id)
    started = time.time()
    dep_jars = module.fetcher(module, ancestor_ids(node))
    module.dep_jars = list(dep_jars)
    module.load_ts = started
    logger.debug("Resolved %d dependencies for %s", len(module.dep_jars), module.id)
    return module.dep_jars


def _descriptors(module: Module) -> list[Path]:
    paths = []
    for path in (module.file, module.file_orig):
        if path is not None and path not in paths:
            paths.append(path)
    return paths
