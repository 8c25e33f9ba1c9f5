"""Publish comparison locations to the host's native navigation list.

// [LAW:one-source-of-truth] NavigationEntry is the canonical jump target shape.
// [LAW:single-enforcer] publish() is the sole writer of the navigation list.

Forward/back traversal belongs to the host (quickfix :cnext / :cprev); this
module only replaces the list wholesale after every full build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from diffdirs.core.host import HostEditor

logger = logging.getLogger(__name__)

PREV_DIFF_KEY = "<Plug>PrevDiff"
NEXT_DIFF_KEY = "<Plug>NextDiff"

# (lhs, rhs, description)
_KEYMAPS = (
    (PREV_DIFF_KEY, ":silent cp!<cr>", "Previous diff tab"),
    (NEXT_DIFF_KEY, ":silent cn!<cr>", "Next diff tab"),
)


@dataclass(frozen=True)
class NavigationEntry:
    """One comparison, pointing at its editable buffer."""

    buffer: int
    editable_path: Path
    label: str

    def to_host(self) -> dict:
        return {
            "bufnr": self.buffer,
            "filename": str(self.editable_path),
            "text": self.label,
        }


class NavigationPublisher:
    def __init__(self, host: HostEditor):
        self._host = host

    def publish(self, entries: Iterable[NavigationEntry]) -> None:
        """Replace the host list with entries. Never appends."""
        items = [entry.to_host() for entry in entries]
        self._host.set_navigation_list(items)
        logger.debug("published %d navigation entries", len(items))


def register_keymaps(host: HostEditor) -> None:
    """Install the previous/next mappings and make quickfix jumps reuse tabs."""
    host.add_option_flag("switchbuf", "usetab")
    for lhs, rhs, desc in _KEYMAPS:
        host.set_keymap(lhs, rhs, desc)
