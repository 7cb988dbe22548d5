"""Command-line interface for compilebench.

Provides the main CLI entry point with ``run`` and ``list`` subcommands.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from compilebench import __version__
from compilebench.config import PipelineConfig, load_projects, select_projects
from compilebench.errors import BenchmarkError, ConfigurationError
from compilebench.logging import setup_logging
from compilebench.pipeline import run_pipeline
from compilebench.project import Project
from compilebench.projects import DEFAULT_PROJECTS


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """compilebench — time repeated clean compiles of real-world projects."""


def _load(projects_file: Path | None) -> list[Project]:
    if projects_file is None:
        return list(DEFAULT_PROJECTS)
    try:
        return load_projects(projects_file)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--rounds",
    type=int,
    default=10,
    show_default=True,
    help="Timed clean+compile rounds per project.",
)
@click.option(
    "--no-warmup",
    is_flag=True,
    help="Skip the parallel warmup compile. Also set when NO_WARMUP is in the environment.",
)
@click.option(
    "--no-compile",
    is_flag=True,
    help=(
        "Skip the timed rounds; the report only has its header. "
        "Also set when NO_COMPILE is in the environment."
    ),
)
@click.option("--no-clone", is_flag=True, help="Never clone missing projects.")
@click.option(
    "--projects-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML project list (default: built-in list).",
)
@click.option(
    "--project",
    "project_names",
    multiple=True,
    help="Only benchmark this project, by name or org/name (repeatable).",
)
@click.option(
    "--benchmark-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the project checkouts (default: ..).",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-command timeout in seconds (default: wait forever).",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
def run(
    target: Path,
    rounds: int,
    no_warmup: bool,
    no_compile: bool,
    no_clone: bool,
    projects_file: Path | None,
    project_names: tuple[str, ...],
    benchmark_root: Path | None,
    timeout: float | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Benchmark compile times and write the report to TARGET.

    \b
    Examples:
        # Full run over the built-in project list
        compilebench run results/compile-times.csv

        # Two projects, three rounds, no warmup
        compilebench run out.csv --project cats --project fs2 \\
            --rounds 3 --no-warmup
    """
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    projects = _load(projects_file)
    try:
        projects = select_projects(
            projects, list(project_names) or None, benchmark_root=benchmark_root
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    config = PipelineConfig(
        target=target,
        rounds=rounds,
        warmup=not (no_warmup or "NO_WARMUP" in os.environ),
        compile=not (no_compile or "NO_COMPILE" in os.environ),
        clone=not no_clone,
        timeout=timeout,
    )

    try:
        results = run_pipeline(projects, config)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    except BenchmarkError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904

    click.echo(f"Benchmarked {len(results)} project(s); report saved to: {target}")


@main.command("list")
@click.option(
    "--projects-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML project list (default: built-in list).",
)
def list_projects(projects_file: Path | None) -> None:
    """Show the projects a run would benchmark."""
    for proj in _load(projects_file):
        click.echo(
            f"{proj.show()}: compile={' '.join(proj.compile_command)} "
            f"clean={' '.join(proj.clean_command)} "
            f"clone={'yes' if proj.should_clone else 'no'}"
        )
