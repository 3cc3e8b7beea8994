"""Command-line interface for deploy_manifest.

Provides the main entry point and subcommands for generating deployment
reports, checking license compliance and printing dependency trees.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.tree import Tree

from deploy_manifest.analyzer import ModuleAnalyzer
from deploy_manifest.models import (
    DependencyNode,
    DependencyTreeFormat,
    DependencyTreeOptions,
    LicenseOptions,
    ModuleReport,
    PropertyOptions,
)
from deploy_manifest.reporters import get_reporter
from deploy_manifest.store import REPO_ENV_VAR, ManifestStore

app = typer.Typer(
    name="deploy-manifest",
    help="Maven module dependency, license and build-property reports.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("deploy_manifest")


def _setup_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.getLogger("deploy_manifest").setLevel(level)


def _split(value: Optional[str]) -> set[str]:
    """Parse a comma-separated option into a set of trimmed values."""
    if not value:
        return set()
    return {part.strip() for part in value.split(",") if part.strip()}


def _analyze(
    pom: Path,
    analyzer: ModuleAnalyzer,
) -> Optional[ModuleReport]:
    """Run the analyzer, printing root manifest errors.

    Returns:
        The module report, or None if the root manifest could not be read.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    ) as progress:
        task = progress.add_task("Resolving manifest...", total=None)
        try:
            report = analyzer.analyze(pom)
        except (FileNotFoundError, ValueError) as e:
            err_console.print(f"[red]Error reading {pom}:[/red] {e}")
            return None
        progress.update(task, completed=True)
    return report


PomOption = Annotated[
    Path,
    typer.Option(
        "--pom",
        "-p",
        help="Path to the module's pom.xml (or its directory)",
        exists=True,
    ),
]
RepoOption = Annotated[
    Optional[Path],
    typer.Option(
        "--repo-local",
        envvar=REPO_ENV_VAR,
        help="Local repository root (default: ~/.m2/repository)",
    ),
]
ScopesOption = Annotated[
    str,
    typer.Option(
        "--scopes",
        help="Comma-separated dependency scopes to include",
    ),
]
IncludeOptionalOption = Annotated[
    bool,
    typer.Option(
        "--include-optional",
        help="Include optional dependencies",
    ),
]
TransitiveOption = Annotated[
    bool,
    typer.Option(
        "--transitive/--direct-only",
        help="Aggregate licenses of transitive dependencies",
    ),
]
IncompatibleOption = Annotated[
    str,
    typer.Option(
        "--incompatible",
        "-i",
        help="Comma-separated license names treated as incompatible",
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


@app.command()
def report(
    pom: PomOption,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: deploy-report.<ext>)",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown or json",
        ),
    ] = "markdown",
    scopes: ScopesOption = "compile,runtime",
    include_optional: IncludeOptionalOption = False,
    transitive: TransitiveOption = False,
    incompatible: IncompatibleOption = "GPL-3.0,AGPL-3.0",
    tree_format: Annotated[
        DependencyTreeFormat,
        typer.Option(
            "--tree-format",
            help="Dependency section layout",
        ),
    ] = DependencyTreeFormat.FLAT,
    depth: Annotated[
        int,
        typer.Option(
            "--depth",
            help="Maximum dependency depth (-1 = unlimited, 0 = direct only)",
        ),
    ] = -1,
    properties: Annotated[
        bool,
        typer.Option(
            "--properties/--no-properties",
            help="Include the build-property snapshot",
        ),
    ] = True,
    repo_local: RepoOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate a deployment report for a module.

    Resolves the module's POM against its parents, imported BOMs and the
    local repository, then writes licenses, dependencies and build
    properties to a Markdown or JSON file.
    """
    _setup_logging(verbose)

    try:
        reporter = get_reporter(output_format)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    allowed = _split(scopes)
    analyzer = ModuleAnalyzer(
        tree_options=DependencyTreeOptions(
            include=True,
            depth=depth,
            scopes=allowed,
            format=tree_format,
            include_optional=include_optional,
        ),
        license_options=LicenseOptions(
            include=True,
            include_transitive_licenses=transitive,
            allowed_scopes=allowed,
            include_optional=include_optional,
            incompatible_licenses=_split(incompatible),
        ),
        property_options=PropertyOptions(include=properties),
        store=ManifestStore(repo_local),
    )

    result = _analyze(pom, analyzer)
    if result is None:
        raise typer.Exit(code=1)

    if output is None:
        output = Path(f"deploy-report{reporter.default_extension}")

    if result.licenses:
        summary = result.licenses.summary
        console.print(
            f"Resolved licenses for [bold]{summary.identified}[/bold]/{summary.total} dependencies"
        )

    try:
        reporter.write(result, output)
    except OSError as e:
        err_console.print(f"[red]Error writing output:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]Generated:[/green] {output}")


@app.command()
def check(
    pom: PomOption,
    incompatible: IncompatibleOption = "GPL-3.0,AGPL-3.0",
    transitive: TransitiveOption = True,
    scopes: ScopesOption = "compile,runtime",
    include_optional: IncludeOptionalOption = False,
    repo_local: RepoOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Check dependency licenses against an incompatible-license list.

    Exit codes:
        0 - No incompatible licenses found
        1 - Incompatible licenses found or error occurred
    """
    _setup_logging(verbose)

    analyzer = ModuleAnalyzer(
        license_options=LicenseOptions(
            include=True,
            include_transitive_licenses=transitive,
            allowed_scopes=_split(scopes),
            include_optional=include_optional,
            incompatible_licenses=_split(incompatible),
        ),
        store=ManifestStore(repo_local),
    )
    result = _analyze(pom, analyzer)
    if result is None or result.licenses is None:
        raise typer.Exit(code=1)

    licenses = result.licenses
    if not licenses.details:
        console.print("[green]No dependencies to check[/green]")
        raise typer.Exit(code=0)

    console.print(f"Checking [bold]{licenses.summary.total}[/bold] dependencies...")

    unknown = [d.artifact for d in licenses.details if d.license == "unknown"]
    if unknown:
        console.print(f"\n[yellow]Unknown licenses ({len(unknown)}):[/yellow]")
        for artifact in sorted(unknown):
            console.print(f"  - {artifact}")

    high = [w for w in licenses.warnings if w.severity == "HIGH"]
    if licenses.compliance.has_incompatible_licenses:
        console.print(
            f"\n[red]Incompatible licenses ({licenses.compliance.incompatible_count}):[/red]"
        )
        for warning in high:
            console.print(f"  - {warning.artifact}: {warning.license}")
        raise typer.Exit(code=1)

    console.print(
        f"\n[green]All {licenses.summary.total} dependencies are compliant![/green]"
    )
    raise typer.Exit(code=0)


def _add_nodes(branch: Tree, nodes: list[DependencyNode]) -> None:
    for node in nodes:
        label = f"{node.group_id}:{node.artifact_id}:{node.version or '?'} [dim]({node.scope})[/dim]"
        if node.optional:
            label += " [yellow]optional[/yellow]"
        _add_nodes(branch.add(label), node.children)


@app.command()
def tree(
    pom: PomOption,
    depth: Annotated[
        int,
        typer.Option(
            "--depth",
            help="Maximum dependency depth (-1 = unlimited, 0 = direct only)",
        ),
    ] = -1,
    scopes: ScopesOption = "compile,runtime",
    include_optional: IncludeOptionalOption = False,
    repo_local: RepoOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the resolved dependency tree of a module."""
    _setup_logging(verbose)

    analyzer = ModuleAnalyzer(
        tree_options=DependencyTreeOptions(
            include=True,
            depth=depth,
            scopes=_split(scopes),
            format=DependencyTreeFormat.TREE,
            include_optional=include_optional,
        ),
        store=ManifestStore(repo_local),
    )
    result = _analyze(pom, analyzer)
    if result is None:
        raise typer.Exit(code=1)

    if result.dependencies is None or not result.dependencies.tree:
        console.print("[yellow]No dependencies found[/yellow]")
        raise typer.Exit(code=0)

    root = Tree(f"[bold]{result.coordinate.key}[/bold]")
    _add_nodes(root, result.dependencies.tree)
    console.print(root)
    summary = result.dependencies.summary
    console.print(
        f"{summary.total} dependencies ({summary.direct} direct, {summary.transitive} transitive)"
    )


if __name__ == "__main__":
    app()
