"""Per-project benchmark results."""

from __future__ import annotations

from dataclasses import dataclass

from compilebench.project import Project


@dataclass(frozen=True)
class Result:
    """All timed rounds of one project, earliest round first.

    ``times`` holds wall-clock compile durations in seconds.
    """

    project: Project
    times: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "times", tuple(self.times))

    def render(self) -> str:
        """Render the report line: project name, then whole seconds per round."""
        return ", ".join([self.project.name, *(str(int(t)) for t in self.times)])
