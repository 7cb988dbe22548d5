"""Pipeline configuration and project list loading.

Handles:
- The resolved :class:`PipelineConfig` the pipeline runs with.
- Validating a configuration and a project list before any work starts.
- Loading project lists from YAML files.
- Selecting a subset of projects by name.
"""

from __future__ import annotations

import dataclasses
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from compilebench.errors import ConfigurationError
from compilebench.executor import DEFAULT_CLONE_COMMAND
from compilebench.logging import get_logger
from compilebench.project import Project, sbt_project

log = get_logger("config")


# ---------------------------------------------------------------------------
# PipelineConfig
# ---------------------------------------------------------------------------


@dataclass
class PipelineConfig:
    """Resolved configuration for a benchmark run."""

    target: Path
    rounds: int = 10
    warmup: bool = True
    compile: bool = True  # Timed measurement rounds
    clone: bool = True  # Clone missing projects that allow it
    warmup_parallelism: int = 3
    timeout: float | None = None  # Per command; None waits forever
    clone_command: tuple[str, ...] = field(default=DEFAULT_CLONE_COMMAND)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: PipelineConfig) -> list[ValidationError]:
    """Validate a pipeline configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.target == Path("."):
        errors.append(ValidationError(field="target", message="Report target path is required."))
    elif config.target.is_dir():
        errors.append(
            ValidationError(
                field="target",
                message=f"Report target is a directory: {config.target}",
            )
        )

    if config.rounds < 1:
        errors.append(
            ValidationError(
                field="rounds",
                message=f"Need at least one measured round (got {config.rounds}).",
            )
        )

    if config.warmup_parallelism < 1:
        errors.append(
            ValidationError(
                field="warmup_parallelism",
                message=(
                    f"Warmup parallelism must be at least 1 (got {config.warmup_parallelism})."
                ),
            )
        )

    if config.timeout is not None and config.timeout <= 0:
        errors.append(
            ValidationError(
                field="timeout",
                message=f"Timeout must be positive (got {config.timeout}).",
            )
        )

    if not config.clone_command:
        errors.append(ValidationError(field="clone_command", message="Clone command is empty."))

    if not config.compile:
        errors.append(
            ValidationError(
                field="compile",
                message="Measurement is disabled; the report will only contain its header.",
                severity="warning",
            )
        )

    return errors


def validate_projects(projects: list[Project]) -> list[ValidationError]:
    """Check that the project list is non-empty and its identities unique."""
    errors: list[ValidationError] = []
    if not projects:
        errors.append(ValidationError(field="projects", message="No projects to benchmark."))

    seen: set[str] = set()
    for proj in projects:
        ident = proj.show()
        if ident in seen:
            errors.append(
                ValidationError(field="projects", message=f"Duplicate project: {ident}")
            )
        seen.add(ident)
    return errors


def check_config(config: PipelineConfig, projects: list[Project]) -> None:
    """Log warnings and raise on any validation error.

    Raises:
        ConfigurationError: Listing every fatal problem found.
    """
    problems = validate_config(config) + validate_projects(projects)
    for w in problems:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in problems if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ConfigurationError("Invalid benchmark configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML project files
# ---------------------------------------------------------------------------


def load_projects(path: Path) -> list[Project]:
    """Load a project list from a YAML file.

    File format::

        projects:
          - org: typelevel
            name: cats
          - org: kubukoz
            name: work-project
            compile_command: ["sbt", "IntegrationTest/compile;Test/compile"]
            command_prefix: nix develop --command
            should_clone: false

    Unspecified commands default to ``sbt compile`` / ``sbt clean``.
    Commands may be lists or shell-like strings.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    if not path.exists():
        raise ConfigurationError(f"Project file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("projects"), list):
        raise ConfigurationError(f"{path} must be a mapping with a 'projects' list")

    return [_project_from_dict(item, path) for item in data["projects"]]


def _project_from_dict(data: Any, path: Path) -> Project:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Project entries in {path} must be mappings, got {data!r}")
    org = data.get("org")
    name = data.get("name")
    if not org or not name:
        raise ConfigurationError(f"Project entry in {path} needs 'org' and 'name': {data!r}")

    proj = sbt_project(str(org), str(name))
    try:
        if "compile_command" in data:
            proj = proj.with_compile_command(_tokens(data["compile_command"]))
        if "clean_command" in data:
            proj = dataclasses.replace(proj, clean_command=tuple(_tokens(data["clean_command"])))
        if "command_prefix" in data:
            proj = proj.with_command_prefix(_tokens(data["command_prefix"]))
    except ValueError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc
    if "should_clone" in data:
        proj = proj.with_clone(bool(data["should_clone"]))
    return proj


def _tokens(value: Any) -> list[str]:
    """Normalise a YAML command value into a token list."""
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, list):
        return [str(v) for v in value]
    raise ValueError(f"Commands must be a string or a list, got {value!r}")


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def select_projects(
    projects: list[Project],
    names: list[str] | None,
    *,
    benchmark_root: Path | None = None,
) -> list[Project]:
    """Filter *projects* to *names*, keeping list order.

    A name matches either a project's ``name`` or its ``org/name``.

    Raises:
        ConfigurationError: If a requested name matches no project.
    """
    selected = list(projects)
    if names:
        wanted = set(names)
        unknown = wanted - {p.name for p in projects} - {p.show() for p in projects}
        if unknown:
            raise ConfigurationError(f"Unknown project(s): {', '.join(sorted(unknown))}")
        selected = [p for p in projects if p.name in wanted or p.show() in wanted]
    if benchmark_root is not None:
        selected = [p.with_benchmark_root(benchmark_root) for p in selected]
    return selected
