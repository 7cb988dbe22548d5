"""Benchmark pipeline.

Projects flow through four stages, in this order:

1. Acquisition: clone missing checkouts, one project at a time.
2. Warmup: one untimed compile per project on a small thread pool, to
   start build servers and fill caches.  Failures are logged and ignored.
3. Barrier: wait until every warmup compile is finished.
4. Measurement: for each project in turn, ``rounds`` times: clean, then
   compile under a wall-clock timer.  Any failure aborts the run.

The report is written only after the last project has been measured, so an
aborted run leaves no report behind.

All heavy work happens in subprocesses, so threads are enough for the
parallel warmup.  Measurement never runs in parallel: a concurrent build
would skew the timings.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from compilebench.config import PipelineConfig, check_config
from compilebench.errors import (
    AcquisitionError,
    CommandError,
    MeasurementError,
    WarmupError,
)
from compilebench.executor import (
    DEFAULT_CLONE_COMMAND,
    CommandRunner,
    clone_project,
    run_command,
)
from compilebench.logging import get_logger
from compilebench.project import Project
from compilebench.report import write_report
from compilebench.results import Result

log = get_logger("pipeline")

Clock = Callable[[], float]


# ---------------------------------------------------------------------------
# Acquisition
# ---------------------------------------------------------------------------


def acquire_stage(
    projects: Iterable[Project],
    *,
    runner: CommandRunner = run_command,
    clone: bool = True,
    clone_command: Sequence[str] = DEFAULT_CLONE_COMMAND,
    timeout: float | None = None,
) -> list[Project]:
    """Make sure every project that may be cloned is present locally.

    Projects that are missing and may not be cloned are passed on as-is;
    their commands will fail later.

    Raises:
        AcquisitionError: If a clone fails.
    """
    acquired: list[Project] = []
    for proj in projects:
        acquired.append(proj)
        if proj.exists():
            log.debug("Found %s at %s", proj.show(), proj.project_root)
            continue
        if not (clone and proj.should_clone):
            log.warning(
                "%s is missing at %s and will not be cloned", proj.show(), proj.project_root
            )
            continue

        log.info("Cloning %s", proj.show())
        try:
            clone_project(proj, runner=runner, clone_command=clone_command, timeout=timeout)
        except CommandError as exc:
            raise AcquisitionError(
                f"Failed to clone {proj.show()}: {exc}", project=proj.show()
            ) from exc
    return acquired


# ---------------------------------------------------------------------------
# Warmup
# ---------------------------------------------------------------------------


def _warmup_one(proj: Project, runner: CommandRunner, timeout: float | None) -> Project:
    log.info("Warming up %s", proj.show())
    try:
        runner(proj.compile_command, proj.project_root, timeout=timeout)
    except CommandError as exc:
        raise WarmupError(str(exc), project=proj.show()) from exc
    log.info("Warmed up %s", proj.show())
    return proj


def warmup_stage(
    projects: Iterable[Project],
    *,
    runner: CommandRunner = run_command,
    enabled: bool = True,
    parallelism: int = 3,
    timeout: float | None = None,
) -> Iterator[Project]:
    """Compile each project once, at most *parallelism* at a time.

    Projects are yielded in input order whatever order their compiles
    finish in.  A failed warmup is logged and the project is still yielded.
    When *enabled* is False the projects pass straight through.
    """
    if not enabled:
        yield from projects
        return

    with ThreadPoolExecutor(max_workers=parallelism, thread_name_prefix="warmup") as pool:
        futures = [(proj, pool.submit(_warmup_one, proj, runner, timeout)) for proj in projects]
        try:
            for proj, future in futures:
                try:
                    future.result()
                except WarmupError as exc:
                    log.error("Failed to warmup %s: %s", proj.show(), exc)
                yield proj
        except BaseException:
            # Queued warmups are cancelled; running ones are waited for.
            pool.shutdown(wait=True, cancel_futures=True)
            raise

    log.info("Warmed up all projects")


# ---------------------------------------------------------------------------
# Barrier
# ---------------------------------------------------------------------------


def barrier(projects: Iterable[Project]) -> list[Project]:
    """Drain *projects* completely before handing them on.

    Applied to the warmup stage, this returns only once every warmup
    compile has exited.
    """
    ready = list(projects)
    log.debug("%d project(s) ready for measurement", len(ready))
    return ready


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


def measure_project(
    proj: Project,
    *,
    rounds: int,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
    clock: Clock = time.monotonic,
) -> Result:
    """Run *rounds* clean+compile cycles of *proj*, timing each compile.

    Raises:
        MeasurementError: If any clean or compile fails.
    """
    log.info("Starting process for %s", proj.show())
    times: list[float] = []
    for round_index in range(1, rounds + 1):
        try:
            runner(proj.clean_command, proj.project_root, timeout=timeout)
            start = clock()
            runner(proj.compile_command, proj.project_root, timeout=timeout)
            elapsed = clock() - start
        except CommandError as exc:
            raise MeasurementError(
                f"Round {round_index} of {proj.show()} failed: {exc}",
                project=proj.show(),
                round_index=round_index,
            ) from exc
        log.info("Compiled %s in %ds (round %d)", proj.show(), int(elapsed), round_index)
        times.append(elapsed)
    return Result(project=proj, times=tuple(times))


def measure_stage(
    projects: Sequence[Project],
    *,
    rounds: int,
    runner: CommandRunner = run_command,
    enabled: bool = True,
    timeout: float | None = None,
    clock: Clock = time.monotonic,
) -> list[Result]:
    """Measure each project in turn; returns no results when disabled."""
    if not enabled:
        log.info("Measurement disabled, skipping %d project(s)", len(projects))
        return []
    return [
        measure_project(proj, rounds=rounds, runner=runner, timeout=timeout, clock=clock)
        for proj in projects
    ]


# ---------------------------------------------------------------------------
# Whole pipeline
# ---------------------------------------------------------------------------


def run_pipeline(
    projects: Sequence[Project],
    config: PipelineConfig,
    *,
    runner: CommandRunner = run_command,
    clock: Clock = time.monotonic,
) -> list[Result]:
    """Run every stage and write the report to ``config.target``.

    Raises:
        ConfigurationError: Before any work if the configuration is invalid.
        AcquisitionError: If cloning a project fails.
        MeasurementError: If a timed round fails.  No report is written.
        ReportError: If the report cannot be written.
    """
    check_config(config, list(projects))
    log.info(
        "Benchmarking %d project(s), %d round(s) each (warmup: %s, compile: %s)",
        len(projects),
        config.rounds,
        "on" if config.warmup else "off",
        "on" if config.compile else "off",
    )

    acquired = acquire_stage(
        projects,
        runner=runner,
        clone=config.clone,
        clone_command=config.clone_command,
        timeout=config.timeout,
    )
    warmed = warmup_stage(
        acquired,
        runner=runner,
        enabled=config.warmup,
        parallelism=config.warmup_parallelism,
        timeout=config.timeout,
    )
    ready = barrier(warmed)
    results = measure_stage(
        ready,
        rounds=config.rounds,
        runner=runner,
        enabled=config.compile,
        timeout=config.timeout,
        clock=clock,
    )

    write_report(config.target, results)
    return results
