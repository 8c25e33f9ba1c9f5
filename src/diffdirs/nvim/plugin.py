"""Neovim remote plugin: :DiffDirs, DiffDirsSetup(), DiffDirsFiles(), DiffDirsJump().

Registered through rplugin/python3/diffdirs_rplugin.py; run :UpdateRemotePlugins once
after installing. All handlers are sync so they execute on the editor's
command thread, one at a time.

Lua usage:

    vim.fn.DiffDirsSetup({ right_diff_opt_fn = "function(win) vim.wo[win].wrap = false end" })
    vim.cmd("DiffDirs ~/old ~/new")
    for _, path in ipairs(vim.fn.DiffDirsFiles()) do ... end
    vim.fn.DiffDirsJump("src/main.c")
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import pynvim

import diffdirs.core.roots
import diffdirs.io.logging_setup
import diffdirs.io.settings
from diffdirs.app.navigation import register_keymaps
from diffdirs.app.session import DiffSession
from diffdirs.core.config import DiffConfig
from diffdirs.core.errors import ArgumentError, DiffDirsError, format_report
from diffdirs.nvim.host import NvimHost, lua_hook

logger = logging.getLogger(__name__)


def build_config(nvim: "pynvim.Nvim", options: dict | None) -> DiffConfig:
    """Resolve hook expressions (setup options over settings file) into a DiffConfig."""
    merged = diffdirs.io.settings.load_hook_defaults()
    for key, value in (options or {}).items():
        if key not in diffdirs.io.settings.KNOWN_KEYS:
            raise ArgumentError("unknown DiffDirs option: {}".format(key))
        if value is not None and not isinstance(value, str):
            raise ArgumentError("{} must be a Lua function expression string".format(key))
        merged[key] = value

    def _hook(key: str):
        expression = merged.get(key)
        return lua_hook(nvim, expression) if expression else None

    return DiffConfig(
        on_left_pane_finalized=_hook(diffdirs.io.settings.LEFT_HOOK_KEY),
        on_right_pane_finalized=_hook(diffdirs.io.settings.RIGHT_HOOK_KEY),
    )


@pynvim.plugin
class DiffDirsPlugin:
    def __init__(self, nvim: "pynvim.Nvim"):
        self.nvim = nvim
        diffdirs.io.logging_setup.configure(run_name="nvim", stream=False)
        self.host = NvimHost(nvim)
        self.session = DiffSession(self.host)
        self._configured = False

    @contextmanager
    def _reporting(self, operation: str) -> Iterator[None]:
        """// [LAW:single-enforcer] Top-level error handler for every entry point.

        Reports the error with its traceback and leaves the editor in whatever
        state was reached. Nothing is rolled back.
        """
        try:
            yield
        except DiffDirsError as e:
            logger.error("%s failed: %s", operation, e)
            self.nvim.err_write(format_report(e) + "\n")
        except Exception as e:
            logger.exception("%s failed unexpectedly", operation)
            self.nvim.err_write(format_report(e) + "\n")

    def _ensure_configured(self) -> None:
        # Settings-file defaults apply even when DiffDirsSetup() was never called.
        if not self._configured:
            self.session.configure(build_config(self.nvim, None))
            self._configured = True

    @pynvim.function("DiffDirsSetup", sync=True)
    def setup(self, args):
        with self._reporting("setup"):
            # An empty Lua table arrives as an empty list.
            options = args[0] if args and args[0] else {}
            if not isinstance(options, dict):
                raise ArgumentError("DiffDirsSetup expects a table of options")
            self.session.configure(build_config(self.nvim, options))
            self._configured = True

    @pynvim.command("DiffDirs", nargs="+", complete="dir", sync=True)
    def diff_dirs(self, args):
        with self._reporting("DiffDirs"):
            roots = diffdirs.core.roots.from_args(args)
            self._ensure_configured()
            register_keymaps(self.host)
            self.session.reset(roots)
            count = self.session.build_all()
            logger.info("DiffDirs opened %d comparison(s)", count)

    @pynvim.function("DiffDirsFiles", sync=True)
    def diff_files(self, args):
        return self.session.cached_paths()

    @pynvim.function("DiffDirsJump", sync=True)
    def jump_diff_tab(self, args):
        with self._reporting("DiffDirsJump"):
            if len(args) != 1 or not isinstance(args[0], str):
                raise ArgumentError("DiffDirsJump expects exactly one path")
            self.session.jump(args[0])
