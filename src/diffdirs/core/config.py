"""Session-wide pane configuration.

// [LAW:one-source-of-truth] DiffConfig is resolved once at setup time and held by the session.

The only options are the two pane hooks. Read-only / editable pane
attributes are always applied; hooks run after them, with the finalized pane.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from diffdirs.core.errors import DiffDirsError, HostInteractionError
from diffdirs.core.host import HostEditor

logger = logging.getLogger(__name__)

PaneHook = Callable[[object], None]


@dataclass(frozen=True)
class DiffConfig:
    on_left_pane_finalized: Optional[PaneHook] = None
    on_right_pane_finalized: Optional[PaneHook] = None

    def finalize_left(self, host: HostEditor) -> None:
        """Read-only policy, then the left hook."""
        host.apply_pane_policy(editable=False)
        _run_hook(self.on_left_pane_finalized, host, "left")

    def finalize_right(self, host: HostEditor) -> None:
        """Editable policy, then the right hook."""
        host.apply_pane_policy(editable=True)
        _run_hook(self.on_right_pane_finalized, host, "right")


def _run_hook(hook: Optional[PaneHook], host: HostEditor, side: str) -> None:
    if hook is None:
        return
    pane = host.current_pane()
    try:
        hook(pane)
    except DiffDirsError:
        raise
    except Exception as e:
        logger.error("%s pane hook failed: %s", side, e)
        raise HostInteractionError("{} pane hook failed: {}".format(side, e)) from e
