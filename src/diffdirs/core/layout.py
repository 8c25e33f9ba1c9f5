"""Per-file comparison layouts.

// [LAW:dataflow-not-control-flow] Layout procedure chosen by _LAYOUTS lookup on the RootSet variant.
// [LAW:single-enforcer] open_view() is the sole place panes get created.

Two-way:                      Three-way:

  +---------+---------+         +---------+---------+
  | left    | right   |         | left    | right   |
  | ro      | editable|         | ro      | ro      |
  +---------+---------+         +---------+---------+
                                | output (editable) |
                                +-------------------+

A failure part way through leaves the panes opened so far in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from diffdirs.core.config import DiffConfig
from diffdirs.core.host import HostEditor, SplitPlacement, ViewHandle
from diffdirs.core.roots import RootSet, ThreeWay, TwoWay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenedView:
    """The container of one comparison and its editable side."""

    view: ViewHandle
    editable_buffer: int
    editable_path: Path


def _opened(host: HostEditor, editable_path: Path) -> OpenedView:
    return OpenedView(
        view=host.current_container(),
        editable_buffer=host.current_buffer(),
        editable_path=editable_path,
    )


def _open_two_way(
    host: HostEditor, roots: TwoWay, rel_path: str, is_first: bool, config: DiffConfig
) -> OpenedView:
    right_file = roots.right / rel_path

    host.edit(roots.left / rel_path, new_container=not is_first)
    config.finalize_left(host)

    host.diff_split(right_file, SplitPlacement.VERTICAL)
    config.finalize_right(host)
    return _opened(host, right_file)


def _open_three_way(
    host: HostEditor, roots: ThreeWay, rel_path: str, is_first: bool, config: DiffConfig
) -> OpenedView:
    output_file = roots.output / rel_path

    host.edit(roots.left / rel_path, new_container=not is_first)
    config.finalize_left(host)

    # Only the output side is writable in three-way mode.
    host.diff_split(roots.right / rel_path, SplitPlacement.VERTICAL)
    config.finalize_left(host)

    host.diff_split(output_file, SplitPlacement.BOTRIGHT)
    config.finalize_right(host)
    return _opened(host, output_file)


_LAYOUTS = {
    TwoWay: _open_two_way,
    ThreeWay: _open_three_way,
}


def open_view(
    host: HostEditor,
    roots: RootSet,
    rel_path: str,
    *,
    is_first: bool,
    config: DiffConfig,
) -> OpenedView:
    """Lay out the comparison for rel_path.

    is_first reuses the focused container instead of creating a new one; only
    the first file of a full build passes True.
    """
    layout = _LAYOUTS[type(roots)]
    opened = layout(host, roots, rel_path, is_first, config)
    logger.debug("opened %s (editable: %s)", rel_path, opened.editable_path)
    return opened
