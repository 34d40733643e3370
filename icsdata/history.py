"""History lines kept in an ICS header, with iterators that survive deletion."""

from __future__ import annotations

from typing import Iterator

from icsdata.errors import ErrorCode, IcsError
from icsdata.symbols import HISTORY_KEYWORD

LINE_LENGTH = 256
STRLEN_TOKEN = 20
FIELD_SEP = "\t"
EOL = "\n"


def _check_length(key: str, value: str) -> None:
    # "history" + sep + key + sep + value + newline + terminator
    if len(HISTORY_KEYWORD) + len(key) + len(value) + 4 > LINE_LENGTH:
        raise IcsError(ErrorCode.LINE_OVERFLOW)


def _reject(text: str, forbidden: str) -> None:
    if any(char in text for char in forbidden):
        raise IcsError(ErrorCode.ILL_PARAMETER)


def _join(key: str, value: str) -> str:
    return f"{key}{FIELD_SEP}{value}" if key else value


class History:
    """Ordered collection of history lines.

    Deleted lines leave a hole rather than shifting the others, so that
    iterators handed out earlier stay valid.
    """

    def __init__(self, read_only: bool = False) -> None:
        self.read_only = read_only
        self._lines: list[str | None] = []

    def add(self, key: str | None, value: str) -> None:
        """Append a line made of ``key`` and ``value``; ``key`` may be empty."""
        if self.read_only:
            raise IcsError(ErrorCode.NOT_VALID_ACTION)
        self._append(key or "", value, FIELD_SEP, EOL)

    def _append(self, key: str, value: str, field_sep: str, line_sep: str) -> None:
        """Append a line whose fields are separated by ``field_sep``.

        Occurrences of ``field_sep`` in the value are stored as the
        standard field separator.
        """
        _check_length(key, value)
        _reject(key, FIELD_SEP + field_sep + line_sep + EOL + "\n\r")
        _reject(value, line_sep + EOL + "\n\r")
        line = _join(key, value)
        if field_sep != FIELD_SEP:
            line = line.replace(field_sep, FIELD_SEP)
        self._lines.append(line)

    def __len__(self) -> int:
        return sum(line is not None for line in self._lines)

    def __iter__(self) -> Iterator[str]:
        return self.iterator(None)

    def iterator(self, key: str | None = None) -> HistoryIterator:
        """Return an iterator over the lines; with ``key``, only lines with that key."""
        return HistoryIterator(self, key)

    def delete(self, key: str | None = None) -> None:
        """Delete all lines with ``key``; with no key, delete every line."""
        if not key:
            self.clear()
            return
        prefix = key[: STRLEN_TOKEN - 1] + FIELD_SEP
        self._lines = [
            None if line is not None and line.startswith(prefix) else line
            for line in self._lines
        ]
        while self._lines and self._lines[-1] is None:
            self._lines.pop()

    def clear(self) -> None:
        """Remove every line."""
        self._lines = []


class HistoryIterator:
    """Walks the lines of a :class:`History`, optionally only those with one key.

    The most recently returned line can be deleted or replaced.
    """

    def __init__(self, history: History, key: str | None = None) -> None:
        self._history = history
        self._key = key[: STRLEN_TOKEN - 1] + FIELD_SEP if key else ""
        self._next = -1
        self._previous = -1
        self._advance()

    def _advance(self) -> None:
        lines = self._history._lines
        self._previous = self._next
        index = self._next + 1
        if self._key:
            while index < len(lines) and (
                lines[index] is None or not lines[index].startswith(self._key)
            ):
                index += 1
        self._next = index if index < len(lines) else -1

    def __iter__(self) -> HistoryIterator:
        return self

    def __next__(self) -> str:
        try:
            return self.next_string()
        except IcsError as exc:
            if exc.code is ErrorCode.END_OF_HISTORY:
                raise StopIteration from None
            raise

    def next_string(self) -> str:
        """Return the next whole line; END_OF_HISTORY when there is none."""
        lines = self._history._lines
        if self._next >= len(lines):
            self._next = -1
        if self._next >= 0 and lines[self._next] is None:
            previous = self._previous
            while self._next >= 0 and lines[self._next] is None:
                self._advance()
            self._previous = previous
        if self._next < 0:
            raise IcsError(ErrorCode.END_OF_HISTORY)
        line = lines[self._next]
        self._advance()
        return line

    def next_key_value(self) -> tuple[str, str]:
        """Return the next line split into key and value.

        A line without a usable key yields an empty key and the whole line.
        """
        line = self.next_string()
        key, sep, value = line.partition(FIELD_SEP)
        if sep and 0 < len(key) < STRLEN_TOKEN:
            return key, value
        return "", line

    def _current_index(self) -> int | None:
        lines = self._history._lines
        index = self._previous
        if index < 0 or index >= len(lines) or lines[index] is None:
            return None
        return index

    def delete_current(self) -> None:
        """Delete the line returned last; does nothing if there is none."""
        index = self._current_index()
        if index is None:
            return
        lines = self._history._lines
        lines[index] = None
        if index == len(lines) - 1:
            lines.pop()
        self._previous = -1

    def replace_current(self, key: str | None, value: str) -> None:
        """Replace the line returned last; does nothing if there is none."""
        index = self._current_index()
        if index is None:
            return
        key = key or ""
        _check_length(key, value)
        _reject(key, FIELD_SEP + EOL + "\n\r")
        _reject(value, EOL + "\n\r")
        self._history._lines[index] = _join(key, value)