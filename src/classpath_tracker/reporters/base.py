"""Base interface for output reporters.

A reporter turns the visited module forest into a document; the
Markdown reporter is the only one shipped.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from classpath_tracker.forest import Node


class BaseReporter(ABC):
    """Renders a module forest and writes it to a file."""

    @abstractmethod
    def render(self, roots: list[Node]) -> str:
        """Render a module forest to formatted output.

        Args:
            roots: Roots of the module forest.

        Returns:
            Rendered output as a string.
        """
        ...

    def write(self, roots: list[Node], output_path: Path) -> None:
        """Render and write output to a file.

        Args:
            roots: Roots of the module forest.
            output_path: Path to write the output file.
        """
        content = self.render(roots)
        output_path.write_text(content, encoding="utf-8")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Short name of the output format, e.g. "markdown"."""
        ...

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """File extension used when no output path is given."""
        ...
