"""Markdown reporter for project structure overviews.

This module provides a reporter that renders a module forest as a
Markdown document using Jinja2 templates.
"""

from dataclasses import dataclass
from datetime import datetime
from importlib.resources import files
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from classpath_tracker.forest import Node, map_forest
from classpath_tracker.models import Module
from classpath_tracker.reporters.base import BaseReporter


@dataclass
class ModuleRow:
    """Display data for one module in the report."""

    artifact: str
    coordinate: str
    descriptor: Optional[str]
    final_name: Optional[str]
    source_dirs: list[str]
    dependency_count: Optional[int]
    depth: int = 0


class MarkdownReporter(BaseReporter):
    """Reporter that generates a Markdown project structure report.

    Attributes:
        template: The Jinja2 template to use for rendering.
        sources_only: Prune modules that have no source directories and
            no retained submodules.
    """

    def __init__(
        self, template_path: Optional[Path] = None, sources_only: bool = False
    ) -> None:
        """Initialize the Markdown reporter.

        Args:
            template_path: Optional path to a custom Jinja2 template.
                If not provided, uses the default bundled template.
            sources_only: Drop branches without any source directories.
        """
        self.sources_only = sources_only
        if template_path:
            env = Environment(
                loader=FileSystemLoader(template_path.parent),
                autoescape=False,
            )
            self.template = env.get_template(template_path.name)
        else:
            self.template = self._load_default_template()

    def _load_default_template(self) -> Template:
        template_content = (
            files("classpath_tracker.templates")
            .joinpath("modules.md.j2")
            .read_text(encoding="utf-8")
        )
        env = Environment(autoescape=False)
        return env.from_string(template_content)

    def rows(self, roots: list[Node]) -> list[ModuleRow]:
        """Reshape the forest into display rows in pre-order.

        Returns:
            One row per retained module, with its nesting depth.
        """
        display = map_forest(self._to_row, self._keep, roots)
        result: list[ModuleRow] = []

        def flatten(node: Node, depth: int) -> None:
            node.contents.depth = depth
            result.append(node.contents)
            for child in node.children:
                flatten(child, depth + 1)

        for root in display:
            flatten(root, 0)
        return result

    def render(self, roots: list[Node]) -> str:
        """Render the module forest to Markdown.

        Args:
            roots: Roots of the module forest.

        Returns:
            Rendered Markdown document as a string.
        """
        return self.template.render(
            modules=self.rows(roots),
            generated_at=datetime.now(),
        )

    @staticmethod
    def _to_row(module: Module) -> tuple[ModuleRow, bool]:
        row = ModuleRow(
            artifact=module.id.artifact,
            coordinate=str(module.id),
            descriptor=str(module.file) if module.file else None,
            final_name=module.final_name,
            source_dirs=[str(d) for d in module.source_dirs],
            dependency_count=(
                len(module.dep_jars) if module.dep_jars is not None else None
            ),
        )
        return row, True

    def _keep(self, node: Node) -> bool:
        if not self.sources_only:
            return True
        return bool(node.contents.source_dirs or node.children)

    @property
    def format_name(self) -> str:
        """Return the output format name.

        Returns:
            The string "markdown".
        """
        return "markdown"

    @property
    def default_extension(self) -> str:
        """Return the default file extension for Markdown files.

        Returns:
            The string ".md".
        """
        return ".md"
