"""Tests for core.file_set: union, ordering, and per-entry skip semantics."""

import logging
import os

from diffdirs.core.file_set import collect_file_paths, presence, resolve, sort_key


def test_resolve_is_sorted_union_of_both_roots(make_tree):
    left = make_tree("L", ["a.txt", "b.txt"])
    right = make_tree("R", ["b.txt", "c.txt"])
    assert resolve(left, right) == ["a.txt", "b.txt", "c.txt"]


def test_resolve_returns_nested_paths_relative_to_each_root(make_tree):
    left = make_tree("L", ["src/main.c", "README"])
    right = make_tree("R", ["src/util/helpers.c", "src/main.c"])
    assert resolve(left, right) == ["README", "src/main.c", "src/util/helpers.c"]


def test_resolve_ignores_directories(make_tree):
    left = make_tree("L", ["only/file.txt"])
    (left / "empty_dir").mkdir()
    right = make_tree("R")
    (right / "also" / "empty").mkdir(parents=True)
    assert resolve(left, right) == ["only/file.txt"]


def test_ordering_is_component_wise():
    paths = ["a-b", "a/b", "a.txt", "a/a/z"]
    # A plain string sort would put "a/..." after "a-b" and "a.txt".
    assert sorted(paths, key=sort_key) == ["a/a/z", "a/b", "a-b", "a.txt"]


def test_resolve_independent_of_creation_order(tmp_path):
    names = ["z.txt", "m/n.txt", "a.txt", "m/a.txt"]
    for i, order in enumerate((names, list(reversed(names)))):
        root = tmp_path / "tree{}".format(i)
        for rel in order:
            (root / rel).parent.mkdir(parents=True, exist_ok=True)
            (root / rel).write_text("x")
    assert resolve(tmp_path / "tree0", tmp_path / "nope") == resolve(
        tmp_path / "nope", tmp_path / "tree1"
    )


def test_missing_root_contributes_nothing(make_tree, tmp_path, caplog):
    left = make_tree("L", ["a.txt"])
    with caplog.at_level(logging.WARNING, logger="diffdirs"):
        result = resolve(left, tmp_path / "does-not-exist")
    assert result == ["a.txt"]
    assert "root does not exist" in caplog.text


def test_both_roots_missing_yields_empty(tmp_path):
    assert resolve(tmp_path / "x", tmp_path / "y") == []


def test_file_symlink_counts_as_file(make_tree):
    left = make_tree("L", ["real.txt"])
    os.symlink(left / "real.txt", left / "link.txt")
    assert collect_file_paths(left) == {"real.txt", "link.txt"}


def test_broken_symlink_is_logged_and_skipped(make_tree, caplog):
    left = make_tree("L", ["a.txt"])
    os.symlink(left / "gone.txt", left / "dangling.txt")
    with caplog.at_level(logging.WARNING, logger="diffdirs"):
        paths = collect_file_paths(left)
    assert paths == {"a.txt"}
    assert "broken symbolic link" in caplog.text


def test_directory_symlink_is_not_descended(make_tree):
    left = make_tree("L", ["sub/a.txt"])
    os.symlink(left / "sub", left / "loop")
    assert collect_file_paths(left) == {"sub/a.txt"}


def test_unreadable_directory_is_skipped_not_fatal(make_tree, caplog, monkeypatch):
    left = make_tree("L", ["ok.txt", "locked/secret.txt", "open/fine.txt"])
    real_scandir = os.scandir

    def scandir(path):
        if os.path.basename(path) == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)
    with caplog.at_level(logging.WARNING, logger="diffdirs"):
        paths = collect_file_paths(left)

    assert paths == {"ok.txt", "open/fine.txt"}
    assert "error occurred during walking dir: {}. err: Permission denied".format(
        left / "locked"
    ) in caplog.text


def test_presence_marks_each_side(make_tree):
    left = make_tree("L", ["a.txt", "b.txt"])
    right = make_tree("R", ["b.txt", "c.txt"])
    assert presence(left, right) == [
        ("a.txt", True, False),
        ("b.txt", True, True),
        ("c.txt", False, True),
    ]
