"""The export, unset and env builtins."""

from __future__ import annotations

import sys
from functools import cmp_to_key
from typing import Iterable, Optional, TextIO

from .environment import Environment, has_equal, key_length, valid_key_name
from .errors import ErrorCode, Status


def _compare(first: str, second: str) -> int:
    width = max(key_length(first), key_length(second))
    left, right = first[:width], second[:width]
    return (left > right) - (left < right)


def sorted_entries(env: Environment) -> list[str]:
    """Entries ordered by name, the environment itself left untouched."""
    return sorted(env, key=cmp_to_key(_compare))


def _stream(out: Optional[TextIO]) -> TextIO:
    return out if out is not None else sys.stdout


def print_exports(env: Environment, out: Optional[TextIO] = None) -> None:
    """Print every entry as a 'declare -x' line, sorted by name."""
    stream = _stream(out)
    for entry in sorted_entries(env):
        name, equal, value = entry.partition("=")
        if equal:
            print(f'declare -x {name}="{value}"', file=stream)
        else:
            print(f"declare -x {name}", file=stream)


def export(
    env: Environment,
    args: Iterable[str],
    status: Status,
    out: Optional[TextIO] = None,
) -> int:
    """Set or add variables; with no arguments list them.

    Invalid names are reported and skipped. Existing entries are replaced
    by the last argument naming them; a new name is added from the first
    argument naming it. Returns the exit status.
    """
    args = list(args)
    if not args:
        print_exports(env, out)
        return 0
    failed = False
    for arg in args:
        if not valid_key_name(arg):
            status.report(ErrorCode.NOT_VALID_IDENTIFIER, arg)
            failed = True
    valid = [arg for arg in args if valid_key_name(arg)]
    for arg in valid:
        index = env.index_of(arg)
        if index is not None:
            env.entries[index] = arg
    for arg in valid:
        if env.index_of(arg) is None:
            env.entries.append(arg)
    return 1 if failed else 0


def unset(env: Environment, args: Iterable[str]) -> int:
    """Remove every entry whose name is given. Returns the exit status."""
    names = {arg[:key_length(arg)] for arg in args}
    env.entries[:] = [
        entry for entry in env.entries if entry[:key_length(entry)] not in names
    ]
    return 0


def print_env(env: Environment, out: Optional[TextIO] = None) -> int:
    """Print the entries that carry a value, in order. Returns the exit status."""
    stream = _stream(out)
    for entry in env:
        if has_equal(entry):
            print(entry, file=stream)
    return 0