"""Invocation of external build and archive tools."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ToolInvocationError(RuntimeError):
    """An external tool could not be run or exited with non-zero status.

    Attributes:
        program: Program that was invoked.
        args: Arguments passed to the program.
        returncode: Exit status, or None if the program could not start.
        output: Combined stdout/stderr captured from the program.
    """

    def __init__(
        self,
        program: str,
        args: list[str],
        returncode: Optional[int],
        output: str,
    ) -> None:
        self.program = program
        self.args = args
        self.returncode = returncode
        self.output = output
        if returncode is None:
            summary = f"Could not run {program}"
        else:
            summary = f"{program} exited with status {returncode}"
        super().__init__(f"{summary} ({' '.join(args)}):\n{output}")


def run_tool(program: str, args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a program and return its combined output.

    Args:
        program: Executable name or path.
        args: Argument list.
        cwd: Optional working directory.

    Returns:
        Everything the program printed to stdout and stderr.

    Raises:
        ToolInvocationError: If the program is missing or exits non-zero.
    """
    logger.debug("Running %s %s", program, " ".join(args))
    try:
        completed = subprocess.run(
            [program, *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ToolInvocationError(program, args, None, str(e)) from e

    if completed.returncode != 0:
        raise ToolInvocationError(
            program, args, completed.returncode, completed.stdout
        )
    return completed.stdout
