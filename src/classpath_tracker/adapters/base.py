"""Base interface for build tool adapters.

Adapters run an external build tool on a project descriptor, normalize its
output into :class:`~classpath_tracker.models.Module` records and assemble
them into a forest. Each module keeps a reference to the adapter routine
that re-fetches its dependencies.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from classpath_tracker.config import ToolConfig
from classpath_tracker.forest import Node, build_tree, walk
from classpath_tracker.models import Id, Module


class BaseAdapter(ABC):
    """Abstract base class for build tool adapters.

    Attributes:
        config: External program names.
    """

    def __init__(self, config: Optional[ToolConfig] = None) -> None:
        """Initialize the adapter.

        Args:
            config: Tool configuration. Defaults to :class:`ToolConfig`.
        """
        self.config = config or ToolConfig()

    @abstractmethod
    def visit(self, path: Path) -> list[Node]:
        """Discover the project structure rooted at a descriptor.

        Args:
            path: Path to the project descriptor.

        Returns:
            Roots of the module forest.

        Raises:
            FileNotFoundError: If the descriptor does not exist.
            ValueError: If the tool output describes no usable project.
            ToolInvocationError: If the build tool fails.
        """
        ...

    @abstractmethod
    def fetch_dep_jars(self, module: Module, ids: list[Id]) -> list[Path]:
        """Ask the build tool for the dependency archives of a module.

        Args:
            module: Module to resolve.
            ids: Ids of the module's ancestors, root first.

        Returns:
            Dependency archive paths in classpath order.
        """
        ...

    @classmethod
    @abstractmethod
    def can_handle(cls, path: Path) -> bool:
        """Check if this adapter understands the given descriptor."""
        ...

    @property
    @abstractmethod
    def tool_name(self) -> str:
        """Return a human-readable name of the build tool."""
        ...

    def _assemble(self, modules: list[Module], source: Path) -> list[Node]:
        """Build the module forest from a flat, emission-ordered list.

        The first module is always a root. Any other module whose parent id
        is absent or matches no module becomes an additional root.

        Raises:
            ValueError: If there are no modules, or the parent relation
                contains a cycle.
        """
        if not modules:
            raise ValueError(f"{self.tool_name} reported no projects for {source}")

        parents: dict[int, Module] = {}
        roots = [modules[0]]
        for module in modules[1:]:
            parent = self._find_parent(module, modules)
            if parent is None:
                roots.append(module)
            else:
                parents[id(module)] = parent

        def is_child(parent: Module, candidate: Module) -> bool:
            return parents.get(id(candidate)) is parent

        forest = [build_tree(root, modules, is_child) for root in roots]

        placed = sum(1 for _ in walk(forest))
        if placed != len(modules):
            reachable = {id(node.contents) for node in walk(forest)}
            stray = [str(m.id) for m in modules if id(m) not in reachable]
            raise ValueError(
                f"Cycle in parent relation of {source}: {', '.join(stray)}"
            )
        return forest

    @staticmethod
    def _find_parent(module: Module, modules: list[Module]) -> Optional[Module]:
        if module.parent_id is None:
            return None
        for candidate in modules:
            if candidate is not module and module.parent_id.matches(candidate.id):
                return candidate
        return None
