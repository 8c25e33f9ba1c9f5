"""Error taxonomy for diffdirs.

// [LAW:one-source-of-truth] Every error class the engine raises is defined here.
// [LAW:single-enforcer] format_report() is the sole user-facing error formatter.

TraversalError is the only class recovered internally (by core.file_set).
Everything else propagates to the top-level handler, which reports it and
leaves the editor in whatever partial state was reached.
"""

from __future__ import annotations

import traceback


class DiffDirsError(Exception):
    """Base class for all diffdirs errors."""


class HostInteractionError(DiffDirsError):
    """A host editor primitive or a configured pane hook failed."""


class ArgumentError(DiffDirsError):
    """Wrong command arity, unknown jump path, or no active diff session."""


class TraversalError(DiffDirsError):
    """One filesystem entry could not be enumerated."""

    def __init__(self, path: str, reason: str):
        super().__init__("error occurred during walking dir: {}. err: {}".format(path, reason))
        self.path = path
        self.reason = reason


class ReentrancyError(DiffDirsError):
    """A session operation was started while another one was still running.

    Typically a pane hook that itself triggers :DiffDirs or a jump. This is an
    unsupported precondition violation; it is detected, never recovered.
    """


def format_report(error: BaseException) -> str:
    """Render an error with its traceback for display to the user."""
    summary = "{}: {}".format(type(error).__name__, error)
    if error.__traceback__ is None:
        return summary
    tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return "{}\n{}".format(summary, tb.rstrip("\n"))
