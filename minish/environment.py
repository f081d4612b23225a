"""The shell's environment: an ordered list of NAME=value entries."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def key_length(entry: str) -> int:
    """Length of the name part of an entry, up to the first '='."""
    index = entry.find("=")
    return len(entry) if index == -1 else index


def has_equal(entry: str) -> bool:
    """True if the entry carries a value."""
    return "=" in entry


def _is_name_start(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalpha())


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def valid_key_name(name: str) -> bool:
    """True if the part before '=' is a valid variable name."""
    if not name or not _is_name_start(name[0]):
        return False
    return all(_is_name_char(c) for c in name[1:key_length(name)])


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


class Environment:
    """Ordered environment entries, each either NAME=value or a bare NAME."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self.entries: list[str] = list(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def _find(self, name: str) -> Optional[int]:
        for index, entry in enumerate(self.entries):
            if entry[:key_length(entry)] == name:
                return index
        return None

    def lookup(self, key: str) -> Optional[str]:
        """Value of a variable, '' if it has no value, None if absent."""
        index = self._find(key)
        if index is None:
            return None
        entry = self.entries[index]
        return entry[key_length(entry) + 1:]

    def expand_variable(self, name: str) -> str:
        """Value used when expanding $name: empty if absent."""
        return self.lookup(name) or ""

    def index_of(self, key: str) -> Optional[int]:
        """Position of the entry named by key (NAME or NAME=value), or None."""
        return self._find(key[:key_length(key)])

    def set_entry(self, key: str, value: str) -> None:
        """Replace the entry for key with key=value, or append it."""
        entry = f"{key}={value}"
        index = self.index_of(key)
        if index is None:
            self.entries.append(entry)
        else:
            self.entries[index] = entry

    def increment_shlvl(self) -> None:
        """Raise SHLVL by one, as a nested shell does on start."""
        if not self.entries:
            return
        index = self._find("SHLVL")
        if index is None:
            self.entries.append("SHLVL=1")
            return
        entry = self.entries[index]
        level = _atoi(entry.partition("=")[2]) + 1 if has_equal(entry) else 1
        self.entries[index] = f"SHLVL={level}"

    def as_list(self) -> list[str]:
        """A copy of all entries in order."""
        return list(self.entries)

    def as_dict(self) -> dict[str, str]:
        """Entries that carry a value, as a mapping for child processes."""
        result: dict[str, str] = {}
        for entry in self.entries:
            if has_equal(entry):
                name, _, value = entry.partition("=")
                result.setdefault(name, value)
        return result