"""Command-line interface for classpath_tracker.

Provides subcommands for inspecting the module structure of Maven and
Gradle projects, their dependency archives and the classes they expose.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.tree import Tree

from classpath_tracker.config import ToolConfig
from classpath_tracker.forest import Node
from classpath_tracker.reporters import MarkdownReporter
from classpath_tracker.resolver import ensure_resolved
from classpath_tracker.session import Session
from classpath_tracker.tools import ToolInvocationError

app = typer.Typer(
    name="classpath-tracker",
    help="Discover JVM project modules, dependencies and classes.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("classpath_tracker")

DescriptorOption = Annotated[
    Path,
    typer.Option(
        "--file",
        "-f",
        help="Project descriptor (pom.xml, build.gradle, build.gradle.kts)",
        exists=True,
        readable=True,
    ),
]
ModuleOption = Annotated[
    Optional[str],
    typer.Option(
        "--module",
        "-m",
        help="Artifact name of the module (defaults to the first root)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
]
MavenOption = Annotated[
    str,
    typer.Option("--maven", envvar="CLASSPATH_TRACKER_MAVEN", help="Maven executable"),
]
GradleOption = Annotated[
    str,
    typer.Option(
        "--gradle", envvar="CLASSPATH_TRACKER_GRADLE", help="Gradle executable"
    ),
]


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("classpath_tracker").setLevel(level)


def _open_session(descriptor: Path, maven: str, gradle: str) -> Session:
    """Visit a descriptor in a fresh session.

    Exits with code 1 and an error message if the visit fails.
    """
    config = ToolConfig.from_env()
    config.maven = maven
    config.gradle = gradle
    session = Session(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Reading {descriptor.name}...", total=None)
        try:
            session.visit(descriptor)
        except (ValueError, ToolInvocationError, OSError) as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(code=1)
        progress.update(task, completed=True)

    return session


def _select_module(session: Session, artifact: Optional[str]) -> Node:
    if artifact is None:
        return session.roots[0]
    node = session.find_module(artifact)
    if node is None:
        err_console.print(f"[red]Error:[/red] No module named {artifact}")
        raise typer.Exit(code=1)
    return node


def _add_branch(tree: Tree, node: Node) -> None:
    module = node.contents
    label = f"[bold]{module.id.artifact}[/bold] [dim]{module.id}[/dim]"
    branch = tree.add(label)
    for child in node.children:
        _add_branch(branch, child)


@app.command()
def tree(
    file: DescriptorOption,
    maven: MavenOption = "mvn",
    gradle: GradleOption = "gradle",
    verbose: VerboseOption = False,
) -> None:
    """Show the module tree of a project."""
    _setup_logging(verbose)
    session = _open_session(file, maven, gradle)

    output = Tree(f"[bold]{file}[/bold]")
    for root in session.roots:
        _add_branch(output, root)
    console.print(output)
    console.print(f"Found [bold]{len(session.modules())}[/bold] modules")


@app.command()
def deps(
    file: DescriptorOption,
    module: ModuleOption = None,
    maven: MavenOption = "mvn",
    gradle: GradleOption = "gradle",
    verbose: VerboseOption = False,
) -> None:
    """List the dependency archives of a module."""
    _setup_logging(verbose)
    session = _open_session(file, maven, gradle)
    node = _select_module(session, module)

    try:
        dep_jars = ensure_resolved(node)
    except (ValueError, ToolInvocationError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if not dep_jars:
        console.print("[yellow]No dependencies[/yellow]")
        return
    for path in dep_jars:
        console.print(str(path), highlight=False, soft_wrap=True)


@app.command()
def classes(
    file: DescriptorOption,
    module: ModuleOption = None,
    prefix: Annotated[
        Optional[str],
        typer.Option("--prefix", "-p", help="Only show classes starting with this"),
    ] = None,
    sources: Annotated[
        bool,
        typer.Option("--sources/--no-sources", help="Include the module's own sources"),
    ] = True,
    jdk: Annotated[
        bool,
        typer.Option("--jdk", help="Include JDK classes from JAVA_HOME/jmods"),
    ] = False,
    maven: MavenOption = "mvn",
    gradle: GradleOption = "gradle",
    verbose: VerboseOption = False,
) -> None:
    """List the classes visible to a module.

    Archives that cannot be read are listed after the classes; they do
    not make the command fail.
    """
    _setup_logging(verbose)
    session = _open_session(file, maven, gradle)
    node = _select_module(session, module)

    try:
        listing = session.collect_classes(
            node, include_sources=sources, include_jdk=jdk
        )
    except (ValueError, ToolInvocationError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    for name in listing.classes:
        if prefix is None or name.startswith(prefix):
            console.print(name, highlight=False, soft_wrap=True)

    if listing.errors:
        console.print(f"\n[yellow]Unreadable archives ({len(listing.errors)}):[/yellow]")
        for error in listing.errors:
            summary = error.message.splitlines()[0] if error.message else ""
            console.print(f"  - {error.path}: {escape(summary)}")


@app.command()
def report(
    file: DescriptorOption,
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output file path",
        ),
    ] = Path("modules.md"),
    template: Annotated[
        Optional[Path],
        typer.Option(
            "--template",
            "-t",
            help="Custom Jinja2 template file",
            exists=True,
            readable=True,
        ),
    ] = None,
    sources_only: Annotated[
        bool,
        typer.Option("--sources-only", help="Omit branches without source directories"),
    ] = False,
    maven: MavenOption = "mvn",
    gradle: GradleOption = "gradle",
    verbose: VerboseOption = False,
) -> None:
    """Write a Markdown overview of the project modules."""
    _setup_logging(verbose)
    session = _open_session(file, maven, gradle)

    reporter = MarkdownReporter(template_path=template, sources_only=sources_only)
    try:
        reporter.write(session.roots, output)
    except Exception as e:
        err_console.print(f"[red]Error writing output:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]Generated:[/green] {output}")


if __name__ == "__main__":
    app()
