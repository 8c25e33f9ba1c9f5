"""Resolve the set of comparable files across two directory roots.

// [LAW:single-enforcer] TraversalError is recovered here and nowhere else.
// [LAW:one-source-of-truth] sort_key() defines RelativePath ordering for every list.

Relative paths are POSIX strings ("pkg/mod.py") so they compare equal across
roots and round-trip through the host editor unchanged.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from diffdirs.core.errors import TraversalError

logger = logging.getLogger(__name__)


def sort_key(rel_path: str) -> list[str]:
    """Component-wise ordering: "a/b" sorts before "a-b"."""
    return rel_path.split("/")


def _report(error: TraversalError) -> None:
    logger.warning("%s", error)


def _walk_files(root: Path) -> Iterator[Path]:
    """Yield every file under root. Directory symlinks are not followed."""
    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            _report(TraversalError(str(directory), e.strerror or str(e)))
            continue

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                elif entry.is_file():
                    yield Path(entry.path)
                elif entry.is_symlink() and not os.path.exists(entry.path):
                    _report(TraversalError(entry.path, "broken symbolic link"))
            except OSError as e:
                _report(TraversalError(entry.path, e.strerror or str(e)))


def collect_file_paths(root: Path | str) -> set[str]:
    """Relative paths of all files under root.

    A missing root contributes nothing; it is logged so a mistyped path shows
    up, but the resolve carries on with the other root.
    """
    root = Path(root)
    if not os.path.lexists(root):
        logger.warning("root does not exist: %s", root)
        return set()

    paths = {file_path.relative_to(root).as_posix() for file_path in _walk_files(root)}
    logger.debug("collected %d file(s) under %s", len(paths), root)
    return paths


def sorted_paths(paths: Iterable[str]) -> list[str]:
    return sorted(set(paths), key=sort_key)


def resolve(left: Path | str, right: Path | str) -> list[str]:
    """Sorted, duplicate-free union of the files under left or right."""
    file_set = collect_file_paths(left)
    file_set.update(collect_file_paths(right))
    return sorted_paths(file_set)


def presence(left: Path | str, right: Path | str) -> list[tuple[str, bool, bool]]:
    """(path, in_left, in_right) for every resolved path, in resolve order."""
    left_set = collect_file_paths(left)
    right_set = collect_file_paths(right)
    return [
        (path, path in left_set, path in right_set)
        for path in sorted_paths(left_set | right_set)
    ]
