"""Error codes, error messages and the shell's last exit status."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, TextIO

PREFIX = "minishell: "
_LAST_SYSTEM_ERRNO = 106


class ErrorCode(IntEnum):
    """Shell-specific error codes; values up to 106 are reserved for errno."""

    ARGC = 107
    PATH = 108
    FILE_NO_EXIST = 109
    DIR_NO_EXIST = 110
    NO_PERMISSION_PATH = 111
    NO_PERMISSION_FILE = 112
    INIT_TERMINAL = 113
    IS_DIRECTORY = 114
    BUILTIN = 115
    FILE_IS_DIRECTORY = 116
    TOO_MANY_ARGS = 117
    NOT_SET = 118
    CD_NO_SUCH_FILE = 119
    NOT_VALID_IDENTIFIER = 120
    COMMAND_NOT_FOUND = 127
    NUMERIC_ARG = 255
    SYNTAX_ERROR = 258


# Messages that embed the subject themselves: (template, resulting exit status).
_WITH_SUBJECT = {
    ErrorCode.NOT_SET: ("cd: {} not set", 1),
    ErrorCode.CD_NO_SUCH_FILE: ("cd: {} No such file or directory", 1),
    ErrorCode.NOT_VALID_IDENTIFIER: ("export: `{}': not a valid identifier", 1),
    ErrorCode.NUMERIC_ARG: (
        "exit: {}: numeric argument required",
        int(ErrorCode.NUMERIC_ARG),
    ),
    ErrorCode.SYNTAX_ERROR: ("syntax error near unexpected token `{}'", 2),
}

# Fixed messages: (text, resulting exit status).
_FIXED = {
    ErrorCode.ARGC: ("Too many arguments!", int(ErrorCode.ARGC)),
    ErrorCode.PATH: ("function get_path failed", int(ErrorCode.PATH)),
    ErrorCode.FILE_NO_EXIST: ("No such file or directory", 127),
    ErrorCode.DIR_NO_EXIST: ("No such file or directory", 1),
    ErrorCode.NO_PERMISSION_PATH: ("Permission denied", 126),
    ErrorCode.NO_PERMISSION_FILE: ("Permission denied", 1),
    ErrorCode.INIT_TERMINAL: ("error in init_terminal", int(ErrorCode.INIT_TERMINAL)),
    ErrorCode.IS_DIRECTORY: ("is a directory", 126),
    ErrorCode.BUILTIN: ("error in builtins", int(ErrorCode.BUILTIN)),
    ErrorCode.FILE_IS_DIRECTORY: ("is a directory", 1),
    ErrorCode.TOO_MANY_ARGS: ("exit: too many arguments", 1),
    ErrorCode.COMMAND_NOT_FOUND: ("command not found", 127),
}


def _describe(code: int, subject: Optional[str]) -> tuple[str, int]:
    """Return the full message line and the exit status an error leads to."""
    code = int(code)
    head = PREFIX
    if subject is not None and code not in _WITH_SUBJECT:
        head += f"{subject}: "
    if code <= _LAST_SYSTEM_ERRNO:
        return head + os.strerror(code), code
    if subject is not None and code in _WITH_SUBJECT:
        template, status = _WITH_SUBJECT[code]
        return head + template.format(subject), status
    text, status = _FIXED.get(code, ("", code))
    return head + text, status


def format_error(code: int, subject: Optional[str] = None) -> str:
    """Return the message line printed for an error code and subject."""
    return _describe(code, subject)[0]


class ShellError(Exception):
    """An error the shell reports to the user with an exit status."""

    def __init__(self, code: int, subject: Optional[str] = None) -> None:
        self.code = code
        self.subject = subject
        super().__init__(format_error(code, subject))


@dataclass
class Status:
    """The exit status of the last command, with error reporting."""

    code: int = 0
    stream: Optional[TextIO] = None

    def set(self, code: int) -> int:
        """Record an exit status silently; negative codes are ignored."""
        if code >= 0:
            self.code = code
        return self.code

    def report(self, code: int, subject: Optional[str] = None) -> int:
        """Print the message for a positive code and record its exit status."""
        if code > 0:
            message, status = _describe(code, subject)
            stream = self.stream if self.stream is not None else sys.stderr
            print(message, file=stream)
            self.code = status
        return self.code