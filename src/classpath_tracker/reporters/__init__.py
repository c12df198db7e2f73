"""Output reporters for project structure documentation.

This module provides reporters for rendering a module forest to
various output formats.
"""

from classpath_tracker.reporters.base import BaseReporter
from classpath_tracker.reporters.markdown import MarkdownReporter, ModuleRow

__all__ = ["BaseReporter", "MarkdownReporter", "ModuleRow"]
