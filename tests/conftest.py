"""Pytest configuration and shared fixtures for diffdirs tests."""

import logging
from pathlib import Path

import pytest

import diffdirs.io.logging_setup
from diffdirs.core.errors import HostInteractionError


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config/log locations at tmp_path and undo logging_setup.configure()."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("DIFFDIRS_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("DIFFDIRS_LOG_FILE", raising=False)
    monkeypatch.delenv("DIFFDIRS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("NVIM", raising=False)
    monkeypatch.setattr(diffdirs.io.logging_setup, "_RUNTIME", None)

    logger = logging.getLogger("diffdirs")
    saved = (list(logger.handlers), logger.propagate, logger.level)
    yield
    for handler in logger.handlers:
        if handler not in saved[0]:
            handler.close()
    logger.handlers[:] = saved[0]
    logger.propagate = saved[1]
    logger.setLevel(saved[2])


# ---------------------------------------------------------------------------
# Directory tree helpers
# ---------------------------------------------------------------------------

def write_tree(root: Path, rel_paths) -> Path:
    """Create root with one small file per relative path."""
    root.mkdir(parents=True, exist_ok=True)
    for rel in rel_paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("content of {}\n".format(rel))
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Factory fixture: make_tree("left", ["a.txt", "sub/b.txt"]) -> Path."""

    def _factory(name, rel_paths=()):
        return write_tree(tmp_path / name, rel_paths)

    return _factory


# ---------------------------------------------------------------------------
# Recording host editor
# ---------------------------------------------------------------------------

class FakeView:
    """ViewHandle whose validity can be flipped by closing it."""

    def __init__(self, number: int):
        self.number = number
        self.closed = False

    def is_valid(self) -> bool:
        return not self.closed

    def __repr__(self):
        return "FakeView({}{})".format(self.number, ", closed" if self.closed else "")


class FakeHost:
    """In-memory HostEditor that records every primitive call.

    Starts with one focused container (number 1). edit(new_container=True)
    creates a new container and focuses it; panes land in the focused one.
    """

    def __init__(self):
        self.containers = [FakeView(1)]
        self.focused = self.containers[0]
        self.panes: list[tuple[int, Path, str]] = []
        self.pane_editable: dict[Path, bool] = {}
        self.buffers: dict[Path, int] = {}
        self.focus_calls: list[int] = []
        self.nav_list = None
        self.nav_publishes = 0
        self.keymaps: dict[str, tuple[str, str]] = {}
        self.option_flags: list[tuple[str, str]] = []
        self.fail_on_open: set[str] = set()
        self.edits = 0
        self._current_path = None

    # containers
    def current_container(self):
        return self.focused

    def focus_container(self, view):
        self.focus_calls.append(view.number)
        self.focused = view

    def close(self, view):
        view.closed = True

    @property
    def new_containers(self) -> int:
        return len(self.containers) - 1

    # panes
    def _open_pane(self, path, how):
        path = Path(path)
        if path.name in self.fail_on_open:
            raise HostInteractionError("cannot open {}".format(path))
        self._current_path = path
        self.panes.append((self.focused.number, path, how))
        self.buffers.setdefault(path, len(self.buffers) + 1)

    def edit(self, path, new_container):
        if new_container:
            view = FakeView(len(self.containers) + 1)
            self.containers.append(view)
            self.focused = view
        self.edits += 1
        self._open_pane(path, "edit")

    def diff_split(self, path, placement):
        self._open_pane(path, placement.value)

    def apply_pane_policy(self, editable):
        self.pane_editable[self._current_path] = editable

    def current_pane(self):
        return (self.focused.number, self._current_path)

    def current_buffer(self):
        return self.buffers[self._current_path]

    # navigation
    def set_navigation_list(self, entries):
        self.nav_list = list(entries)
        self.nav_publishes += 1

    def set_keymap(self, lhs, rhs, desc):
        self.keymaps[lhs] = (rhs, desc)

    def add_option_flag(self, option, flag):
        self.option_flags.append((option, flag))

    def panes_in(self, container_number: int) -> list[tuple[Path, str]]:
        return [(path, how) for number, path, how in self.panes if number == container_number]


@pytest.fixture
def host():
    return FakeHost()
