"""Rendering and writing the compile-time report.

Format (UTF-8 text, one line per project, whole seconds in round order)::

    name, times
    cats, 41, 39, 40
    fs2, 77, 75, 76
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from compilebench.errors import ReportError
from compilebench.logging import get_logger
from compilebench.results import Result

log = get_logger("report")

HEADER = "name, times"


def render_lines(results: Iterable[Result]) -> Iterator[str]:
    """Yield the header followed by one rendered line per result."""
    yield HEADER
    for result in results:
        yield result.render()


def render_report(results: Iterable[Result]) -> str:
    """Render the whole report, including the trailing newline."""
    return "\n".join(render_lines(results)) + "\n"


def write_report(target: Path, results: Iterable[Result]) -> None:
    """Write the report to *target* in a single pass.

    The text is fully rendered before the file is opened, so the target is
    either untouched or holds the complete report.
    """
    text = render_report(results)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ReportError(f"Could not write report to {target}: {exc}") from exc
    log.info("Report written to %s", target)
