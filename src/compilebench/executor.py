"""Running external commands (git/gh, sbt, ...) for the pipeline.

Commands inherit the parent's stdout and stderr so build logs stream to the
console as they are produced.  Nothing is captured: a command either succeeds
or raises one of the :class:`~compilebench.errors.CommandError` subclasses.
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Callable

from compilebench.errors import CommandFailed, CommandTimedOut, ExecutionError
from compilebench.logging import get_logger
from compilebench.project import Project

log = get_logger("executor")

# Signature shared by run_command and the fakes used in tests.
CommandRunner = Callable[..., None]

DEFAULT_CLONE_COMMAND: tuple[str, ...] = ("gh", "repo", "clone")


def run_command(
    command: Sequence[str],
    cwd: Path,
    *,
    timeout: float | None = None,
) -> None:
    """Run *command* in *cwd* and block until it exits.

    Args:
        command: Command tokens; the first one is the executable.
        cwd: Working directory for the process.
        timeout: Seconds to wait before killing the process group.
            ``None`` waits forever.

    Raises:
        ExecutionError: If the process could not be started.
        CommandFailed: If the process exited with a non-zero status.
        CommandTimedOut: If *timeout* elapsed first.
    """
    argv = list(command)
    log.debug("Running: %s (in %s)", " ".join(argv), cwd)
    try:
        proc = subprocess.Popen(
            argv,
            cwd=str(cwd),
            # Own process group only when we may have to kill it; otherwise
            # Ctrl-C reaches the build tool too.
            start_new_session=timeout is not None,
        )
    except OSError as exc:
        raise ExecutionError(
            f"Could not start '{' '.join(argv)}' in {cwd}: {exc}",
            command=argv,
            cwd=cwd,
        ) from exc

    try:
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill_process_group(proc.pid)
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
        raise CommandTimedOut(command=argv, cwd=cwd, timeout=timeout or 0) from exc

    if returncode != 0:
        raise CommandFailed(command=argv, cwd=cwd, returncode=returncode)


def _kill_process_group(pid: int) -> None:
    """Attempt to kill the entire process group on timeout."""
    try:
        os.killpg(os.getpgid(pid), signal.SIGKILL)
    except (ProcessLookupError, PermissionError, OSError):
        pass


def clone_project(
    project: Project,
    *,
    runner: CommandRunner = run_command,
    clone_command: Sequence[str] = DEFAULT_CLONE_COMMAND,
    timeout: float | None = None,
) -> None:
    """Fetch *project* into ``project.benchmark_root / project.name``.

    The clone tool is given the ``org/name`` identity and run from the
    benchmark root, so it creates a directory named after the project.
    """
    root = project.benchmark_root
    command = [*clone_command, project.show()]
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExecutionError(
            f"Could not create benchmark root {root}: {exc}", command=command, cwd=root
        ) from exc
    runner(command, root, timeout=timeout)
