"""The diff session: active roots, the path → view cache, build and jump.

// [LAW:one-source-of-truth] DiffSession owns the RootSet and the SessionCache; nothing else stores them.
// [LAW:single-enforcer] _exclusive() is the sole re-entrancy check.

Per-path lifecycle:

    Unopened --open--> Valid --(user closes the tab)--> Stale --jump--> Valid

Staleness is never tracked. It is discovered on demand by asking the cached
ViewHandle is_valid() at jump time.

Re-entrant use (a pane hook that itself starts :DiffDirs or jumps) is an
unsupported precondition violation. It raises ReentrancyError instead of
corrupting the half-built cache.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import PurePath
from typing import Callable, Iterator, Optional

import diffdirs.core.file_set
from diffdirs.app.navigation import NavigationEntry, NavigationPublisher
from diffdirs.core.config import DiffConfig
from diffdirs.core.errors import ArgumentError, ReentrancyError
from diffdirs.core.host import HostEditor, ViewHandle
from diffdirs.core.layout import open_view
from diffdirs.core.roots import RootSet, describe

logger = logging.getLogger(__name__)

Resolver = Callable[..., list[str]]


class SessionCache:
    """Mapping of relative path → view handle for one build.

    Keys are fixed at construction; entries are replaced, never added or
    deleted, so the key set always matches the resolve that produced it.
    """

    __slots__ = ("_views",)

    def __init__(self, views: Optional[dict[str, ViewHandle]] = None):
        self._views: dict[str, ViewHandle] = dict(views or {})

    def get(self, rel_path: str) -> Optional[ViewHandle]:
        return self._views.get(rel_path)

    def replace(self, rel_path: str, view: ViewHandle) -> None:
        if rel_path not in self._views:
            raise KeyError(rel_path)
        self._views[rel_path] = view

    def paths(self) -> list[str]:
        return list(self._views)

    def __contains__(self, rel_path: object) -> bool:
        return rel_path in self._views

    def __len__(self) -> int:
        return len(self._views)


def normalize_rel_path(rel_path: str) -> str:
    """Collapse redundant separators and "." so ./a//b.txt finds a/b.txt."""
    return PurePath(rel_path).as_posix()


class DiffSession:
    """The one active diff session.

    Constructed once per host connection and passed to whoever needs it;
    reset() replaces the roots and throws the old cache away.
    """

    def __init__(
        self,
        host: HostEditor,
        config: Optional[DiffConfig] = None,
        resolver: Optional[Resolver] = None,
    ):
        self._host = host
        self._config = config or DiffConfig()
        self._resolver: Resolver = resolver or diffdirs.core.file_set.resolve
        self._publisher = NavigationPublisher(host)
        self._roots: Optional[RootSet] = None
        self._cache = SessionCache()
        self._busy = False

    # ─── Accessors ───────────────────────────────────────────────────────

    @property
    def roots(self) -> Optional[RootSet]:
        return self._roots

    @property
    def config(self) -> DiffConfig:
        return self._config

    def configure(self, config: DiffConfig) -> None:
        with self._exclusive("configure"):
            self._config = config

    def cached_paths(self) -> list[str]:
        """Current cache keys in resolve order."""
        return self._cache.paths()

    # ─── Operations ──────────────────────────────────────────────────────

    def reset(self, roots: RootSet) -> None:
        """Install new roots. Nothing carries over from the previous session."""
        with self._exclusive("reset"):
            self._roots = roots
            self._cache = SessionCache()
            logger.info("diff session reset: %s", describe(roots))

    def build_all(self) -> int:
        """Open one comparison per resolved path and publish the navigation list.

        Returns the number of comparisons opened. On failure the error
        propagates immediately; panes already opened stay open and the
        previously installed cache is kept.
        """
        with self._exclusive("build_all"):
            roots = self._require_roots()
            first_view = self._host.current_container()
            rel_paths = self._resolver(*roots.scanned)
            logger.info("building %d comparison(s) for %s", len(rel_paths), describe(roots))

            views: dict[str, ViewHandle] = {}
            entries: list[NavigationEntry] = []
            for index, rel_path in enumerate(rel_paths):
                opened = open_view(
                    self._host,
                    roots,
                    rel_path,
                    is_first=index == 0,
                    config=self._config,
                )
                views[rel_path] = opened.view
                entries.append(
                    NavigationEntry(
                        buffer=opened.editable_buffer,
                        editable_path=opened.editable_path,
                        label=rel_path,
                    )
                )

            self._host.focus_container(first_view)
            self._cache = SessionCache(views)
            self._publisher.publish(entries)
            return len(views)

    def jump(self, rel_path: str) -> ViewHandle:
        """Focus the comparison for rel_path, rebuilding it if it was closed."""
        with self._exclusive("jump"):
            roots = self._require_roots()
            key = normalize_rel_path(rel_path)
            view = self._cache.get(key)
            if view is None:
                raise ArgumentError("invalid diff path: {}".format(rel_path))

            if view.is_valid():
                self._host.focus_container(view)
                return view

            logger.info("comparison for %s was closed; reopening", key)
            opened = open_view(self._host, roots, key, is_first=False, config=self._config)
            self._cache.replace(key, opened.view)
            self._host.focus_container(opened.view)
            return opened.view

    # ─── Internals ───────────────────────────────────────────────────────

    def _require_roots(self) -> RootSet:
        if self._roots is None:
            raise ArgumentError("no active diff session; run :DiffDirs first")
        return self._roots

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        if self._busy:
            raise ReentrancyError(
                "{} called while another diff session operation is running".format(operation)
            )
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
