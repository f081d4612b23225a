"""Finding the executable a command name refers to."""

from __future__ import annotations

import os
from typing import Optional

from .environment import Environment
from .errors import ErrorCode, ShellError


def is_path(cmd: str) -> bool:
    """True if the command is given as a path rather than a bare name."""
    return "/" in cmd


def _is_executable(path: str) -> bool:
    return os.path.exists(path) and os.access(path, os.X_OK)


def resolve_path(cmd: str, env: Environment) -> Optional[str]:
    """Search PATH for cmd; fall back to cmd itself, None if env is empty."""
    if cmd.startswith("./"):
        return cmd
    if len(env) == 0:
        return None
    search = env.lookup("PATH")
    if search is None:
        return cmd
    slash = search.find("/")
    if slash == -1:
        return cmd
    for directory in filter(None, search[slash:].split(":")):
        candidate = f"{directory}/{cmd}"
        if _is_executable(candidate):
            return candidate
    return cmd


def check_command(cmd: Optional[str], env: Environment) -> Optional[str]:
    """Return the path to run for cmd, raising ShellError if it cannot run."""
    if cmd is None:
        return None
    if cmd.startswith(("./", "../")) and os.path.isdir(cmd):
        raise ShellError(ErrorCode.IS_DIRECTORY, cmd)
    path = resolve_path(cmd, env)
    if path is None:
        raise ShellError(ErrorCode.PATH)
    if not os.path.exists(path):
        code = ErrorCode.FILE_NO_EXIST if is_path(cmd) else ErrorCode.COMMAND_NOT_FOUND
        raise ShellError(code, cmd)
    if not os.access(path, os.X_OK):
        raise ShellError(ErrorCode.NO_PERMISSION_PATH, cmd)
    return path