"""Descriptors for the projects being benchmarked.

A :class:`Project` is an immutable value: the ``with_*`` methods return new
descriptors, so a base definition can be shared and specialised freely::

    work = (
        sbt_project("kubukoz", "work-project")
        .with_compile_command(["sbt", "IntegrationTest/compile;Test/compile"])
        .with_command_prefix(["nix", "develop", "--command"])
        .with_clone(False)
    )
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BENCHMARK_ROOT = Path("..")


@dataclass(frozen=True)
class Project:
    """One benchmark target: where it lives and how to build it."""

    org: str
    name: str
    compile_command: tuple[str, ...]
    clean_command: tuple[str, ...]
    should_clone: bool = True
    benchmark_root: Path = DEFAULT_BENCHMARK_ROOT

    def __post_init__(self) -> None:
        # Accept any sequence (e.g. a list from YAML) but store tuples.
        object.__setattr__(self, "compile_command", tuple(self.compile_command))
        object.__setattr__(self, "clean_command", tuple(self.clean_command))
        object.__setattr__(self, "benchmark_root", Path(self.benchmark_root))
        if not self.compile_command:
            raise ValueError(f"Project {self.show()} has an empty compile command")
        if not self.clean_command:
            raise ValueError(f"Project {self.show()} has an empty clean command")

    @property
    def project_root(self) -> Path:
        """Directory of the project's checkout."""
        return self.benchmark_root / self.name

    def show(self) -> str:
        """Return the ``org/name`` display form."""
        return f"{self.org}/{self.name}"

    def exists(self) -> bool:
        """Return whether the checkout directory is present."""
        try:
            return self.project_root.is_dir()
        except OSError:
            return False

    def with_clone(self, should_clone: bool) -> Project:
        return dataclasses.replace(self, should_clone=should_clone)

    def with_compile_command(self, command: Sequence[str]) -> Project:
        return dataclasses.replace(self, compile_command=tuple(command))

    def with_command_prefix(self, prefix: Sequence[str]) -> Project:
        """Prepend *prefix* to both the compile and the clean command."""
        prefix = tuple(prefix)
        return dataclasses.replace(
            self,
            compile_command=prefix + self.compile_command,
            clean_command=prefix + self.clean_command,
        )

    def with_benchmark_root(self, root: Path) -> Project:
        return dataclasses.replace(self, benchmark_root=Path(root))


def sbt_project(org: str, name: str) -> Project:
    """Build a descriptor for a plain sbt project hosted on GitHub."""
    return Project(
        org=org,
        name=name,
        compile_command=("sbt", "compile"),
        clean_command=("sbt", "clean"),
        should_clone=True,
    )
