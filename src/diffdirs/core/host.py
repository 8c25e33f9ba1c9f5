"""Protocol definitions for the host editor primitives diffdirs consumes.

This module has no dependencies on other project modules. The engine
(core.layout, app.session, app.navigation) talks to the editor only through
these structural types; nvim.host is the production implementation and the
tests use a recording fake.

Every HostEditor method may raise HostInteractionError. Implementations
must not swallow primitive failures: partial completion leaves visible editor
state, so the user has to hear about it.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol


class SplitPlacement(Enum):
    """Where a diff split opens relative to the current pane."""

    VERTICAL = "vertical"
    BOTRIGHT = "botright"


class ViewHandle(Protocol):
    """Weak reference to one open comparison view (a container of panes).

    The host owns the view; the user may close it at any time. Callers must
    ask is_valid() on every lookup and never remember the answer.
    """

    def is_valid(self) -> bool:
        ...


class HostEditor(Protocol):
    """Narrow editor interface: containers, panes, buffers, navigation list."""

    def current_container(self) -> ViewHandle:
        """Handle of the focused container."""
        ...

    def focus_container(self, view: ViewHandle) -> None:
        ...

    def edit(self, path: Path, new_container: bool) -> None:
        """Open path as the first pane of a comparison and enter diff mode.

        new_container=False reuses the focused container.
        """
        ...

    def diff_split(self, path: Path, placement: SplitPlacement) -> None:
        """Split the focused container and open path in diff mode."""
        ...

    def apply_pane_policy(self, editable: bool) -> None:
        """Pin the focused pane's buffer and set its modifiable flag."""
        ...

    def current_pane(self) -> object:
        """Handle of the focused pane, as handed to pane hooks."""
        ...

    def current_buffer(self) -> int:
        """Identity (number) of the focused pane's buffer."""
        ...

    def set_navigation_list(self, entries: list[dict]) -> None:
        """Replace the native location list with entries."""
        ...

    def set_keymap(self, lhs: str, rhs: str, desc: str) -> None:
        """Normal-mode mapping, silent and non-remapping."""
        ...

    def add_option_flag(self, option: str, flag: str) -> None:
        """Append a flag to a comma-separated global option."""
        ...
