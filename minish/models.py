"""Data shared by the parser, the expander and the executor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .environment import Environment
from .errors import Status
from .lexer import Token


@dataclass
class Command:
    """One command of a pipeline: its words and its redirections."""

    args: list[str] = field(default_factory=list)
    filenames: list[str] = field(default_factory=list)
    redirections: list[str] = field(default_factory=list)
    index: int = 0
    path: Optional[str] = None
    heredoc_path: Optional[str] = None
    final_infile: Optional[str] = None
    final_outfile: Optional[str] = None
    final_in_red: Optional[str] = None
    final_out_red: Optional[str] = None

    @property
    def redirects(self) -> list[tuple[str, str]]:
        """Pairs of (operator, filename) in the order they were written."""
        return list(zip(self.redirections, self.filenames))

    def cleanup(self) -> None:
        """Delete this command's heredoc file and forget derived paths."""
        if self.heredoc_path is not None and os.path.lexists(self.heredoc_path):
            os.unlink(self.heredoc_path)
        self.heredoc_path = None
        self.path = None


def cleanup_table(table: list[Command]) -> None:
    """Clean up every command of a table and empty it."""
    for command in table:
        command.cleanup()
    table.clear()


@dataclass
class Shell:
    """State of the running shell between and during command lines."""

    env: Environment = field(default_factory=Environment)
    status: Status = field(default_factory=Status)
    tokens: list[Token] = field(default_factory=list)
    table: list[Command] = field(default_factory=list)
    syntax_error: bool = False
    exiting: bool = False
    quotes_removed: bool = False

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> "Shell":
        """A shell whose environment holds the given entries."""
        return cls(env=Environment(entries))