"""Tests for path helpers and the directory walker."""

from __future__ import annotations

from typing import List

from bzlgen.utils.path_utils import (
    join_path,
    longest_common_prefix,
    split_common_root,
    split_path,
    walk_path,
)


def test_split_path_cleans_and_splits() -> None:
    assert split_path("/usr//lib/../include/") == ("/", "usr", "include")
    assert split_path("a/./b") == ("a", "b")
    assert split_path(".") == ()


def test_join_path() -> None:
    assert join_path(()) == ""
    assert join_path(("/", "usr", "include")) == "/usr/include"


def test_longest_common_prefix_uses_whole_segments() -> None:
    paths = [split_path("/src/llvm"), split_path("/src/llvm-project"), split_path("/src/clang/lib")]

    assert longest_common_prefix(paths) == ("/", "src")


def test_longest_common_prefix_of_one_path_is_itself() -> None:
    assert longest_common_prefix([("a", "b")]) == ("a", "b")
    assert longest_common_prefix([]) == ()


def test_split_common_root_single_path() -> None:
    assert split_common_root(["/src/llvm"]) == ("/src/llvm", [""])


def test_split_common_root_multiple_paths() -> None:
    root, relative = split_common_root(["/src/llvm/lib", "/src/llvm/tools/clang", "/src/llvm"])

    assert root == "/src/llvm"
    assert relative == ["lib", "tools/clang", ""]


def test_split_common_root_without_shared_prefix() -> None:
    assert split_common_root(["a/b", "c"]) == ("", ["a/b", "c"])


def test_walk_path_visits_depth_first() -> None:
    tree = {"root": ["a", "b"], "root/a": ["c"], "root/a/c": [], "root/b": []}
    visited: List[str] = []
    closed: List[str] = []

    def visit(path: str):
        visited.append(path)
        return tree[path], lambda: closed.append(path)

    walk_path("root", visit)

    assert visited == ["root", "root/a", "root/a/c", "root/b"]
    assert closed == ["root/a/c", "root/a", "root/b", "root"]


def test_walk_path_without_close() -> None:
    visited: List[str] = []

    def visit(path: str):
        visited.append(path)
        return [], None

    walk_path("only", visit)

    assert visited == ["only"]
