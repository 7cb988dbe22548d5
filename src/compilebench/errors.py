"""Error types raised by the benchmark pipeline.

Command-level failures (:class:`CommandError` and subclasses) come from the
executor.  The stages wrap them into stage-level errors that decide whether
the run continues:

- :class:`AcquisitionError` and :class:`MeasurementError` are fatal.
- :class:`WarmupError` is logged and the project carries on.
- :class:`ConfigurationError` is raised before any work starts.
- :class:`ReportError` is raised if the finished report cannot be saved.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class BenchmarkError(RuntimeError):
    """Base class for every error compilebench raises on purpose."""


class ConfigurationError(BenchmarkError):
    """The pipeline configuration or project list is unusable."""


class ReportError(BenchmarkError):
    """The finished report could not be written to its target."""


class CommandError(BenchmarkError):
    """An external command did not complete successfully.

    Attributes:
        command: The command tokens that were run.
        cwd: The working directory the command was run in.
    """

    def __init__(self, message: str, *, command: Sequence[str], cwd: Path) -> None:
        super().__init__(message)
        self.command = list(command)
        self.cwd = cwd


class CommandFailed(CommandError):
    """The command ran and exited with a non-zero status."""

    def __init__(self, *, command: Sequence[str], cwd: Path, returncode: int) -> None:
        super().__init__(
            f"'{' '.join(command)}' exited with status {returncode} (in {cwd})",
            command=command,
            cwd=cwd,
        )
        self.returncode = returncode


class ExecutionError(CommandError):
    """The command could not be started at all."""


class CommandTimedOut(CommandError):
    """The command ran longer than its timeout and was killed."""

    def __init__(self, *, command: Sequence[str], cwd: Path, timeout: float) -> None:
        super().__init__(
            f"'{' '.join(command)}' timed out after {timeout:g}s (in {cwd})",
            command=command,
            cwd=cwd,
        )
        self.timeout = timeout


class StageError(BenchmarkError):
    """A command failed while a pipeline stage was processing a project."""

    def __init__(self, message: str, *, project: str) -> None:
        super().__init__(message)
        self.project = project


class AcquisitionError(StageError):
    """Cloning a missing project failed."""


class WarmupError(StageError):
    """The untimed warmup compile of a project failed."""


class MeasurementError(StageError):
    """A clean or compile failed during a timed round."""

    def __init__(self, message: str, *, project: str, round_index: int) -> None:
        super().__init__(message, project=project)
        self.round_index = round_index
