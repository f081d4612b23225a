"""The cd and pwd builtins."""

from __future__ import annotations

import errno
import os
import sys
from typing import Iterable, Optional, TextIO

from .environment import Environment
from .errors import ErrorCode, Status


def _errno(err: OSError) -> int:
    return err.errno if err.errno else errno.ENOENT


def cd(env: Environment, args: Iterable[str], status: Status) -> int:
    """Change directory to the first argument, or to $HOME without one.

    Records the old directory in OLDPWD and updates PWD when it is set.
    Returns the exit status.
    """
    args = list(args)
    try:
        previous = os.getcwd()
    except OSError as err:
        return status.report(_errno(err))
    if args:
        target = args[0]
        try:
            os.chdir(target)
        except OSError:
            status.report(ErrorCode.DIR_NO_EXIST, target)
            return 1
    else:
        home = env.lookup("HOME")
        if home is None:
            status.report(ErrorCode.NOT_SET, "HOME")
            return 1
        if home:
            try:
                os.chdir(home)
            except OSError as err:
                return status.report(_errno(err))
    env.set_entry("OLDPWD", previous)
    if env.index_of("PWD") is not None:
        try:
            current = os.getcwd()
        except OSError as err:
            return status.report(_errno(err))
        env.set_entry("PWD", current)
    return 0


def pwd(out: Optional[TextIO] = None, status: Optional[Status] = None) -> int:
    """Print the working directory. Returns the exit status."""
    try:
        current = os.getcwd()
    except OSError as err:
        return (status if status is not None else Status()).report(_errno(err))
    print(current, file=out if out is not None else sys.stdout)
    return 0