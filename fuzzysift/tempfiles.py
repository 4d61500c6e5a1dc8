"""Temporary files holding lists of lines."""

from __future__ import annotations

import contextlib
import os
import tempfile
from typing import Iterable, Optional


def write_temporary_file(data: Iterable[str], separator: str) -> Optional[str]:
    """Write *data* joined and terminated by *separator* to a new temporary file.

    Returns the path of the file, or None when no file could be created.
    """
    try:
        fd, path = tempfile.mkstemp(prefix="fuzzysift-temp-")
    except OSError:
        return None
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(separator.join(data))
        handle.write(separator)
    return path


def remove_files(files: Iterable[str]) -> None:
    """Delete the given files, ignoring any that cannot be removed."""
    for filename in files:
        with contextlib.suppress(OSError):
            os.remove(filename)