"""Helpers shared by the CLI commands."""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

from bzlgen.errors import BzlgenError

# Failures reported as a non-zero exit code instead of a traceback.
RECOVERABLE_ERRORS = (BzlgenError, OSError, ValueError)


@contextmanager
def open_output(path: Optional[str]) -> Iterator[TextIO]:
    """Yield ``sys.stdout``, or the file at ``path`` opened for writing."""
    if not path:
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as handle:
        yield handle
