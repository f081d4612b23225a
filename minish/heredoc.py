"""Here-documents: reading them, expanding them and storing them in files."""

from __future__ import annotations

import os
import re
import tempfile
from typing import Callable, Iterable, Iterator, Optional

from .environment import Environment
from .errors import ShellError
from .models import Command

DEFAULT_BASE = os.path.join(tempfile.gettempdir(), "minish-heredoc-")

_VARIABLE = re.compile(r"\$([A-Za-z0-9][^'\"$ \t\n]*)")


def expand_heredoc_line(line: str, env: Environment) -> str:
    """Replace each $NAME in a here-document line with its value."""
    return _VARIABLE.sub(lambda match: env.expand_variable(match.group(1)), line)


def heredoc_file_path(index: int, base: str = DEFAULT_BASE) -> str:
    """Path of the temporary file holding the here-document of a command."""
    return f"{base}{index}"


def collect_heredoc(
    delimiter: str, lines: Iterable[str], env: Environment, path: str
) -> int:
    """Write expanded lines to path until the delimiter or the end of input.

    Returns the number of lines written. Raises ShellError if the file
    cannot be opened.
    """
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o600)
    except OSError as err:
        raise ShellError(err.errno or 1, path) from err
    written = 0
    with os.fdopen(fd, "w") as handle:
        for line in lines:
            expanded = expand_heredoc_line(line, env)
            if expanded == delimiter:
                break
            handle.write(expanded + "\n")
            written += 1
    return written


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def _reset(command: Command, index: int) -> None:
    command.index = index
    command.heredoc_path = None
    command.path = None
    command.final_infile = None
    command.final_outfile = None
    command.final_in_red = None
    command.final_out_red = None


def prepare_heredocs(
    table: list[Command],
    env: Environment,
    base: str = DEFAULT_BASE,
    reader: Optional[Callable[[], Iterable[str]]] = None,
) -> list[str]:
    """Number the commands and read every here-document into its file.

    reader is called once per here-document and yields its input lines;
    by default lines are read from the terminal. A later here-document of
    the same command replaces an earlier one. Returns the paths written.
    """
    read = reader if reader is not None else _prompt_lines
    written: list[str] = []
    for index, command in enumerate(table):
        _reset(command, index)
        for operator, delimiter in command.redirects:
            if not operator.startswith("<<"):
                continue
            path = heredoc_file_path(command.index, base)
            command.heredoc_path = path
            collect_heredoc(delimiter, read(), env, path)
            if path not in written:
                written.append(path)
    return written