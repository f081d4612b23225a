"""Dispatch of builtin commands, and the echo and exit builtins."""

from __future__ import annotations

import re
import sys
from typing import Iterable, Optional, TextIO

from .directory import cd, pwd
from .errors import ErrorCode
from .exporting import export, print_env, unset
from .models import Command, Shell

_ONLY_N = re.compile(r"-n*")
_NUMERIC = re.compile(r"(?:[+-]?[0-9])*")
_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

BUILTINS = frozenset({"echo", "cd", "pwd", "env", "export", "unset", "exit"})


def is_only_n(arg: str) -> bool:
    """True for an echo option made of '-' and any number of 'n'."""
    return _ONLY_N.fullmatch(arg) is not None


def split_echo_arg(args: list[str]) -> list[str]:
    """Split a first word such as 'echo hello' into 'echo' and the rest."""
    if not args or args[0][4:5] != " ":
        return list(args)
    _, _, rest = args[0].partition(" ")
    return ["echo", rest, *args[1:]]


def echo(args: Iterable[str], out: Optional[TextIO] = None) -> int:
    """Print the arguments joined by spaces; leading -n options drop the newline."""
    stream = out if out is not None else sys.stdout
    words = list(args)
    newline = True
    if words and is_only_n(words[0]):
        newline = False
        while words and is_only_n(words[0]):
            words.pop(0)
    stream.write(" ".join(words))
    if newline:
        stream.write("\n")
    return 0


def is_numeric(text: str) -> bool:
    """True if text is digits, each optionally preceded by a sign."""
    return _NUMERIC.fullmatch(text) is not None


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def exit_builtin(shell: Shell, args: Iterable[str]) -> int:
    """Mark the shell as exiting and set the exit status from the argument.

    A non-numeric argument is reported and gives status 255. More than one
    argument is reported and the shell keeps running. Returns the status.
    """
    args = list(args)
    shell.exiting = True
    if args:
        if is_numeric(args[0]):
            shell.status.set(_atoi(args[0]) % 256)
        else:
            shell.status.report(ErrorCode.NUMERIC_ARG, args[0])
        if len(args) > 1:
            shell.status.report(ErrorCode.TOO_MANY_ARGS)
            shell.exiting = False
    return shell.status.code


def is_builtin(name: str) -> bool:
    """True if run_builtin handles a command of this name."""
    return name in BUILTINS or name.startswith("echo")


def _run_echo(shell: Shell, command: Command, out: Optional[TextIO]) -> int:
    if not shell.quotes_removed:
        command.args = split_echo_arg(command.args)
    if command.args[0] != "echo":
        return shell.status.report(ErrorCode.COMMAND_NOT_FOUND, command.args[0])
    return echo(command.args[1:], out)


def run_builtin(
    shell: Shell, command: Command, out: Optional[TextIO] = None
) -> Optional[int]:
    """Run the command if it is a builtin.

    Returns its exit status, or None if the command is not a builtin.
    """
    if not command.args:
        return None
    name = command.args[0]
    rest = command.args[1:]
    if name == "cd":
        code = cd(shell.env, rest, shell.status)
    elif name == "pwd":
        code = pwd(out, shell.status)
    elif name == "env":
        code = print_env(shell.env, out)
    elif name == "exit":
        code = exit_builtin(shell, rest)
    elif name == "unset":
        code = unset(shell.env, rest)
    elif name == "export":
        code = export(shell.env, rest, shell.status, out)
    elif name.startswith("echo"):
        code = _run_echo(shell, command, out)
    else:
        return None
    return shell.status.set(code)