"""Query history kept in a file, one entry per line."""

from __future__ import annotations

import os


class HistoryError(Exception):
    """The history file cannot be read or written."""


def _write_private(path: str, content: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
        handle.write(content)


class History:
    """Input history with a cursor for browsing back and forth.

    The last line is always the entry being typed. Entries edited while
    browsing are remembered in memory only.
    """

    def __init__(self, path: str, max_size: int) -> None:
        self.path = path
        self.max_size = max_size
        try:
            with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
                data = handle.read()
        except FileNotFoundError:
            data = ""
            try:
                _write_private(path, data)
            except OSError as exc:
                raise self._error(exc) from exc
        except OSError as exc:
            raise self._error(exc) from exc

        lines = data.strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self.lines: list[str] = lines
        self._modified: dict[int, str] = {}
        self._cursor = len(lines) - 1

    def _error(self, exc: OSError) -> HistoryError:
        if isinstance(exc, PermissionError):
            return HistoryError(f"permission denied: {self.path}")
        return HistoryError(f"invalid history file: {exc}")

    def append(self, line: str) -> None:
        """Record *line* and save the history; empty lines are ignored."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size :]
        self.lines = lines + [""]
        try:
            _write_private(self.path, "\n".join(self.lines))
        except OSError as exc:
            raise self._error(exc) from exc

    def override(self, text: str) -> None:
        """Replace the entry under the cursor in memory, without saving it."""
        last = len(self.lines) - 1
        if self._cursor == last:
            self.lines[self._cursor] = text
        elif self._cursor < last:
            self._modified[self._cursor] = text

    def current(self) -> str:
        """The entry under the cursor."""
        if self._cursor in self._modified:
            return self._modified[self._cursor]
        return self.lines[self._cursor]

    def previous(self) -> str:
        """Move to the older entry, stopping at the oldest, and return it."""
        if self._cursor > 0:
            self._cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move to the newer entry, stopping at the newest, and return it."""
        if self._cursor < len(self.lines) - 1:
            self._cursor += 1
        return self.current()