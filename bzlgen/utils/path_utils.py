"""Path splitting, common-root detection and a depth-first directory walker.

Paths are handled as tuples of segments so that prefixes are computed on
whole segments: ``/src/llvm`` and ``/src/llvm-project`` share ``/src`` only.
"""

import os
from pathlib import PurePosixPath
from typing import Callable, List, Optional, Sequence, Tuple

PathParts = Tuple[str, ...]

# Returns the child directories to visit and an optional callback run once
# they have all been visited.
Visitor = Callable[[str], Tuple[Sequence[str], Optional[Callable[[], None]]]]


def split_path(path: str) -> PathParts:
    """Clean ``path`` and split it into segments.

    Examples:
        >>> split_path("/usr//lib/../include")
        ('/', 'usr', 'include')
        >>> split_path(".")
        ()
    """
    cleaned = os.path.normpath(path).replace(os.sep, "/")
    return PurePosixPath(cleaned).parts


def join_path(parts: Sequence[str]) -> str:
    if not parts:
        return ""
    return os.path.join(*parts)


def longest_common_prefix(paths: Sequence[PathParts]) -> PathParts:
    """Return the longest whole-segment prefix shared by all ``paths``."""
    if not paths:
        return ()
    # Every prefix shared by the lexicographic extremes is shared by all.
    low, high = min(paths), max(paths)
    for i, (a, b) in enumerate(zip(low, high)):
        if a != b:
            return low[:i]
    return low


def split_common_root(paths: Sequence[str]) -> Tuple[str, List[str]]:
    """Strip the common root from ``paths``.

    Returns:
        Tuple of (root, relative paths). A single path is its own root, so its
        relative path is the empty string.
    """
    split = [split_path(path) for path in paths]
    root = longest_common_prefix(split)
    return join_path(root), [join_path(parts[len(root):]) for parts in split]


def walk_path(root: str, visit: Visitor) -> None:
    """Visit ``root`` and then, depth first, the children ``visit`` selects."""
    children, close = visit(root)
    for child in children:
        walk_path(os.path.join(root, child), visit)
    if close is not None:
        close()
