"""Neovim implementation of the HostEditor protocol, on top of pynvim.

// [LAW:locality-or-seam] All pynvim usage is isolated in diffdirs.nvim; the engine only sees HostEditor.
// [LAW:single-enforcer] _call() is the sole translator of pynvim failures into HostInteractionError.

Containers are tabpages, panes are windows, the navigation list is quickfix.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

from pynvim.api import NvimError

from diffdirs.core.config import PaneHook
from diffdirs.core.errors import HostInteractionError
from diffdirs.core.host import SplitPlacement

if TYPE_CHECKING:
    import pynvim

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Connection loss surfaces as OSError/EOFError from the msgpack transport.
_HOST_FAILURES = (NvimError, OSError, EOFError)


def _call(description: str, fn: Callable[..., T], *args) -> T:
    try:
        return fn(*args)
    except _HOST_FAILURES as e:
        logger.error("nvim %s failed: %s", description, e)
        raise HostInteractionError("{} failed: {}".format(description, e)) from e


class TabpageView:
    """ViewHandle backed by a Neovim tabpage. Validity is asked fresh each time."""

    __slots__ = ("tabpage",)

    def __init__(self, tabpage: "pynvim.api.Tabpage"):
        self.tabpage = tabpage

    def is_valid(self) -> bool:
        return bool(_call("tabpage validity check", lambda: self.tabpage.valid))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TabpageView) and other.tabpage == self.tabpage

    def __hash__(self) -> int:
        return hash(self.tabpage)

    def __repr__(self) -> str:
        return "TabpageView({})".format(getattr(self.tabpage, "handle", "?"))


class NvimHost:
    """HostEditor over a pynvim session, driven from the editor's RPC thread."""

    def __init__(self, nvim: "pynvim.Nvim"):
        self._nvim = nvim

    def _command(self, cmd: str) -> None:
        logger.debug("nvim command: %s", cmd)
        _call("command {!r}".format(cmd), self._nvim.command, cmd)

    def _escape(self, path: Path) -> str:
        return _call("fnameescape", self._nvim.funcs.fnameescape, str(path))

    # ─── Containers ──────────────────────────────────────────────────────

    def current_container(self) -> TabpageView:
        return TabpageView(_call("get current tabpage", lambda: self._nvim.current.tabpage))

    def focus_container(self, view: TabpageView) -> None:
        def _set():
            self._nvim.current.tabpage = view.tabpage

        _call("set current tabpage", _set)

    # ─── Panes ───────────────────────────────────────────────────────────

    def edit(self, path: Path, new_container: bool) -> None:
        open_cmd = "tabedit" if new_container else "edit"
        self._command("{} {} | diffthis".format(open_cmd, self._escape(path)))

    def diff_split(self, path: Path, placement: SplitPlacement) -> None:
        self._command("{} diffsplit {}".format(placement.value, self._escape(path)))

    def apply_pane_policy(self, editable: bool) -> None:
        modifiable = "modifiable" if editable else "nomodifiable"
        self._command("setlocal winfixbuf | setlocal {}".format(modifiable))

    def current_pane(self) -> "pynvim.api.Window":
        return _call("get current window", lambda: self._nvim.current.window)

    def current_buffer(self) -> int:
        return int(_call("get current buffer", lambda: self._nvim.current.buffer.number))

    # ─── Navigation ──────────────────────────────────────────────────────

    def set_navigation_list(self, entries: list[dict]) -> None:
        _call("setqflist", self._nvim.funcs.setqflist, entries, "r")

    def set_keymap(self, lhs: str, rhs: str, desc: str) -> None:
        opts = {"noremap": True, "silent": True, "desc": desc}
        _call("set keymap {}".format(lhs), self._nvim.api.set_keymap, "n", lhs, rhs, opts)

    def add_option_flag(self, option: str, flag: str) -> None:
        self._command("set {}+={}".format(option, flag))


def lua_hook(nvim: "pynvim.Nvim", expression: str) -> PaneHook:
    """Wrap a Lua function expression as a pane hook.

    The function receives the window id of the finalized pane, e.g.
    "function(win) vim.wo[win].wrap = false end" or "require('my.diff').left".
    """
    code = "return ({})(...)".format(expression)

    def _hook(pane) -> None:
        window_id = getattr(pane, "handle", pane)
        nvim.exec_lua(code, window_id)

    return _hook
