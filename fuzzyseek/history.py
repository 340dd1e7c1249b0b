"""Query history kept in a plain text file, one entry per line."""

from __future__ import annotations

import os

DEFAULT_HISTORY_MAX = 1000

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class HistoryError(Exception):
    """The history file cannot be read or written."""


def _describe(path: str, error: OSError) -> HistoryError:
    if isinstance(error, PermissionError):
        return HistoryError(f"permission denied: {path}")
    return HistoryError(f"invalid history file: {error}")


def _write(path: str, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as f:
        f.write(text)


class History:
    """Navigable list of past queries backed by a file.

    ``lines`` always ends with an entry for the query being typed. Entries
    changed with :meth:`override` are kept in memory only.
    """

    def __init__(self, path: str, max_size: int = DEFAULT_HISTORY_MAX) -> None:
        self.path = path
        self.max_size = max_size
        try:
            with open(path, encoding=_ENCODING, errors=_ERRORS, newline="") as f:
                data = f.read()
        except FileNotFoundError:
            data = ""
            try:
                _write(path, data)
            except OSError as error:
                raise _describe(path, error) from error
        except OSError as error:
            raise _describe(path, error) from error

        lines = data.strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self.lines: list[str] = lines
        self.cursor = len(lines) - 1
        self._modified: dict[int, str] = {}

    def append(self, line: str) -> None:
        """Add ``line`` as the newest entry and save the file; empty lines are ignored."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size :]
        lines.append("")
        self.lines = lines
        try:
            _write(self.path, "\n".join(lines))
        except OSError as error:
            raise _describe(self.path, error) from error

    def override(self, text: str) -> None:
        """Replace the entry under the cursor, without touching the file."""
        last = len(self.lines) - 1
        if self.cursor == last:
            self.lines[self.cursor] = text
        elif self.cursor < last:
            self._modified[self.cursor] = text

    def current(self) -> str:
        """The entry under the cursor."""
        if self.cursor in self._modified:
            return self._modified[self.cursor]
        return self.lines[self.cursor]

    def previous(self) -> str:
        """Move to the older entry, if any, and return the current one."""
        if self.cursor > 0:
            self.cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move to the newer entry, if any, and return the current one."""
        if self.cursor < len(self.lines) - 1:
            self.cursor += 1
        return self.current()