"""Root set variants for a diff session.

// [LAW:one-source-of-truth] TwoWay/ThreeWay are the only shapes a session can have.
// [LAW:single-enforcer] from_args() is the sole command-arity check.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from diffdirs.core.errors import ArgumentError


@dataclass(frozen=True)
class TwoWay:
    """Compare left against right; right is the editable side."""

    left: Path
    right: Path

    @property
    def scanned(self) -> tuple[Path, Path]:
        return (self.left, self.right)


@dataclass(frozen=True)
class ThreeWay:
    """Compare left and right, writing the merge result into output.

    The output root is a write target, never scanned for candidates.
    """

    left: Path
    right: Path
    output: Path

    @property
    def scanned(self) -> tuple[Path, Path]:
        return (self.left, self.right)


RootSet = Union[TwoWay, ThreeWay]


def from_args(args: Sequence[str]) -> RootSet:
    """Build a RootSet from 2 or 3 positional directory arguments.

    Command arguments reach us unexpanded, so "~" and "~user" are resolved here.
    """
    paths = [Path(arg).expanduser() for arg in args]
    if len(paths) == 2:
        return TwoWay(*paths)
    if len(paths) == 3:
        return ThreeWay(*paths)
    raise ArgumentError(
        "DiffDirs takes 2 or 3 directories (left, right[, output]), got {}".format(len(paths))
    )


def describe(roots: RootSet) -> str:
    """Short human-readable form, used in log lines."""
    parts = [str(roots.left), str(roots.right)]
    if isinstance(roots, ThreeWay):
        parts.append(str(roots.output))
    return " | ".join(parts)
