#!/usr/bin/env python3
"""Bundle Forge CLI - Build every sub-project of a workspace into one deployable site.

Usage:
    # Build everything under the current directory into ./dist
    python main.py

    # Another workspace, projects that already have node_modules
    python main.py --root ../course --skip-install

    # Four builds at a time, keep a copy of the site in ./public
    python main.py --jobs 4 --public-mirror public
"""

import sys
from typing import Optional

try:
    import click
    from rich.markup import escape
    from rich.panel import Panel
    from rich.table import Table
except ImportError:
    print("Missing dependencies. Run: pip install click rich")
    sys.exit(1)

from contracts import BuildReport, BuildStatus, BundleForgeError, NoProjectsFoundError
from logging_setup import configure_logging, console
from orchestrator import run_pipeline
from config import settings


STATUS_STYLES = {
    BuildStatus.MERGED: "green",
    BuildStatus.NO_OUTPUT: "yellow",
    BuildStatus.INSTALL_FAILED: "red",
    BuildStatus.BUILD_FAILED: "red",
    BuildStatus.MERGE_FAILED: "red",
}


def render_report(report: BuildReport) -> Table:
    """Per-project status table."""
    table = Table(title="Build results")
    table.add_column("Project")
    table.add_column("Base path")
    table.add_column("Status")
    table.add_column("Details", overflow="fold")

    for outcome in report.outcomes:
        style = STATUS_STYLES.get(outcome.status, "white")
        if outcome.succeeded:
            details = f"{outcome.replacements} asset reference(s) rewritten"
        else:
            details = escape(outcome.detail)
        table.add_row(
            escape(outcome.project.name),
            outcome.project.base_path,
            f"[{style}]{outcome.status.value}[/{style}]",
            details,
        )
    return table


@click.command()
@click.option(
    "--root", "-r",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Workspace root holding the sub-projects (default: current directory)"
)
@click.option(
    "--output", "-o", "output_dir",
    default=None,
    help=f"Shared output directory, relative to the root (default: {settings.output_dir})"
)
@click.option(
    "--skip-install",
    is_flag=True,
    default=False,
    help="Never run the install command"
)
@click.option(
    "--jobs", "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of projects built at the same time"
)
@click.option(
    "--no-clean",
    is_flag=True,
    default=False,
    help="Keep the existing output directory instead of emptying it first"
)
@click.option(
    "--public-mirror",
    default=None,
    help="Also copy the finished site into this directory, relative to the root"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Show debug logging"
)
def main(
    root: Optional[str],
    output_dir: Optional[str],
    skip_install: bool,
    jobs: Optional[int],
    no_clean: bool,
    public_mirror: Optional[str],
    verbose: bool,
):
    """Bundle Forge - build, relocate and route every sub-project of a workspace."""
    configure_logging("DEBUG" if verbose else None)

    console.print(Panel.fit(
        "[bold blue]Bundle Forge[/bold blue]\n"
        "[dim]Multi-project static site builder[/dim]",
        border_style="blue"
    ))

    try:
        result = run_pipeline(
            root=root,
            output_dir=output_dir,
            skip_install=skip_install or None,
            max_workers=jobs,
            clean_output=False if no_clean else None,
            public_mirror_dir=public_mirror,
        )
    except NoProjectsFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("[dim]A project needs a vite.config.* file and a package.json.[/dim]")
        sys.exit(1)
    except BundleForgeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    report = result.report
    console.print()
    console.print(render_report(report))

    tally_style = "green" if not report.failed_outcomes else "yellow"
    console.print(f"\n[{tally_style}]Built {report.tally} project(s)[/{tally_style}]")

    if report.failed_outcomes:
        failed = escape(", ".join(outcome.project.name for outcome in report.failed_outcomes))
        console.print(f"[yellow]Warning:[/yellow] not deployed: {failed}")

    routes = result.route_config.table
    console.print(f"\n[bold]Routing config:[/bold] {result.route_config_path}")
    console.print(f"[bold]Routes:[/bold] {len(routes.static_rules)} static, {len(routes.fallback_rules)} fallback")
    console.print(f"[bold]Output saved to:[/bold] {result.output_root}")
    if result.public_mirror_path:
        console.print(f"[bold]Mirrored to:[/bold] {result.public_mirror_path}")


if __name__ == "__main__":
    main()
