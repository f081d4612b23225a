"""Running a table of commands: redirections, builtins, processes and pipes."""

from __future__ import annotations

import errno
import io
import os
import signal
import subprocess
import sys
import threading
from contextlib import ExitStack, contextmanager
from typing import IO, Iterator, Optional, TextIO, Union

from .builtins import run_builtin
from .environment import Environment
from .errors import ErrorCode, ShellError, Status
from .heredoc import prepare_heredocs
from .models import Command, Shell
from .paths import check_command

_Stage = Union["subprocess.Popen[bytes]", int]


def _create_file(name: str) -> None:
    if name == "":
        raise ShellError(errno.EPERM, name)
    try:
        with open(name, "w"):
            pass
    except OSError as err:
        raise ShellError(err.errno or errno.EPERM, name) from err


def _check_output(command: Command, operator: str, name: str) -> None:
    if not os.path.exists(name):
        _create_file(name)
    if os.path.isdir(name):
        raise ShellError(ErrorCode.FILE_IS_DIRECTORY, name)
    if not os.access(name, os.W_OK):
        raise ShellError(ErrorCode.NO_PERMISSION_FILE, name)
    command.final_outfile = name
    command.final_out_red = operator


def _check_input(command: Command, operator: str, name: str) -> None:
    if operator == "<":
        if not os.path.exists(name) or not os.access(name, os.R_OK):
            raise ShellError(errno.EPERM, name)
        command.final_infile = name
    elif operator == "<<":
        command.final_infile = command.heredoc_path
    command.final_in_red = operator


def check_files(command: Command) -> None:
    """Check every redirection of a command and record the ones that apply.

    Missing output files are created. The last input and the last output
    redirection win. Raises ShellError at the first file that cannot be used.
    """
    for operator, name in command.redirects:
        if operator.startswith(">"):
            _check_output(command, operator, name)
        elif operator.startswith("<"):
            _check_input(command, operator, name)


def _open_input(command: Command, stack: ExitStack) -> Optional[IO[bytes]]:
    if command.final_infile is None:
        return None
    return stack.enter_context(open(command.final_infile, "rb"))


def _open_output(command: Command, stack: ExitStack) -> Optional[TextIO]:
    if command.final_outfile is None:
        return None
    mode = "a" if command.final_out_red == ">>" else "w"
    return stack.enter_context(open(command.final_outfile, mode))


def _default_signals() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    sigquit = getattr(signal, "SIGQUIT", None)
    if sigquit is not None:
        signal.signal(sigquit, signal.SIG_DFL)


def _child_options() -> dict:
    return {"preexec_fn": _default_signals} if os.name == "posix" else {}


def _exit_status(returncode: int) -> int:
    return 128 - returncode if returncode < 0 else returncode


@contextmanager
def _ignoring_interrupts() -> Iterator[None]:
    """Ignore SIGINT in the shell while its children run."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


@contextmanager
def _errors_to(status: Status, stream: Optional[TextIO]) -> Iterator[None]:
    """Send error messages to stream for the duration, if one is given."""
    if stream is None:
        yield
        return
    saved = status.stream
    status.stream = stream
    try:
        yield
    finally:
        status.stream = saved


def execute_single(shell: Shell, command: Command) -> int:
    """Run one command without a pipe; builtins run in the shell itself.

    Returns the exit status, which is also recorded in shell.status.
    """
    try:
        check_files(command)
    except ShellError as err:
        return shell.status.report(err.code, err.subject)
    with ExitStack() as stack:
        try:
            stdin = _open_input(command, stack)
            stdout = _open_output(command, stack)
        except OSError as err:
            return shell.status.report(err.errno or errno.EPERM)
        if not command.args:
            return shell.status.code
        with _errors_to(shell.status, stdout):
            code = run_builtin(shell, command, stdout)
            if code is not None:
                return code
            try:
                path = check_command(command.args[0], shell.env)
            except ShellError as err:
                return shell.status.report(err.code, err.subject)
            sys.stdout.flush()
            try:
                with _ignoring_interrupts():
                    result = subprocess.run(
                        command.args,
                        executable=path,
                        stdin=stdin,
                        stdout=stdout,
                        stderr=stdout,
                        env=shell.env.as_dict(),
                        **_child_options(),
                    )
            except OSError:
                return shell.status.report(
                    ErrorCode.COMMAND_NOT_FOUND, command.args[0]
                )
    return shell.status.set(_exit_status(result.returncode))


def _feed(fd: int, text: str, feeders: list[threading.Thread]) -> None:
    """Write text to fd in the background and close it when done."""
    data = text.encode()
    if not data:
        os.close(fd)
        return

    def write() -> None:
        view = memoryview(data)
        try:
            while view:
                view = view[os.write(fd, view):]
        except OSError:
            pass
        finally:
            os.close(fd)

    thread = threading.Thread(target=write, daemon=True)
    thread.start()
    feeders.append(thread)


def _subshell(shell: Shell, stream: Optional[TextIO]) -> Shell:
    """A copy of the shell for one stage of a pipeline."""
    return Shell(
        env=Environment(shell.env.as_list()),
        status=Status(shell.status.code, stream),
        table=shell.table,
        quotes_removed=shell.quotes_removed,
    )


def _stage(
    shell: Shell,
    command: Command,
    pipe_in: Optional[int],
    pipe_out: Optional[int],
    feeders: list[threading.Thread],
) -> _Stage:
    """Start one stage of a pipeline; takes ownership of both pipe ends."""
    with ExitStack() as stack:
        for fd in (pipe_in, pipe_out):
            if fd is not None:
                stack.callback(os.close, fd)
        try:
            check_files(command)
        except ShellError as err:
            return Status(shell.status.code, shell.status.stream).report(
                err.code, err.subject
            )
        try:
            infile = _open_input(command, stack)
            outfile = _open_output(command, stack)
        except OSError as err:
            return Status(shell.status.code, shell.status.stream).report(
                err.errno or errno.EPERM
            )
        stdin = infile.fileno() if infile is not None else pipe_in
        stdout = outfile.fileno() if outfile is not None else pipe_out
        captured = io.StringIO()
        redirected = stdout is not None
        child = _subshell(shell, captured if redirected else shell.status.stream)

        def finish(code: int) -> int:
            if redirected:
                _feed(os.dup(stdout), captured.getvalue(), feeders)
            return code

        if not command.args:
            return 0
        code = run_builtin(child, command, captured if redirected else None)
        if code is not None:
            return finish(code)
        try:
            path = check_command(command.args[0], child.env)
        except ShellError as err:
            return finish(child.status.report(err.code, err.subject))
        try:
            return subprocess.Popen(
                command.args,
                executable=path,
                stdin=stdin,
                stdout=stdout,
                stderr=stdout,
                env=child.env.as_dict(),
                **_child_options(),
            )
        except OSError:
            return finish(
                child.status.report(ErrorCode.COMMAND_NOT_FOUND, command.args[0])
            )


def _wait(stage: _Stage) -> int:
    if isinstance(stage, int):
        return stage
    return _exit_status(stage.wait())


def execute_pipeline(shell: Shell, table: list[Command]) -> int:
    """Run the commands connected by pipes, each apart from the shell.

    Returns the exit status of the last command, also recorded in shell.status.
    """
    feeders: list[threading.Thread] = []
    stages: list[_Stage] = []
    upstream: Optional[int] = None
    last = len(table) - 1
    sys.stdout.flush()
    with _ignoring_interrupts():
        for position, command in enumerate(table):
            read_end: Optional[int] = None
            write_end: Optional[int] = None
            if position < last:
                read_end, write_end = os.pipe()
            stages.append(_stage(shell, command, upstream, write_end, feeders))
            upstream = read_end
        codes = [_wait(stage) for stage in stages]
        for thread in feeders:
            thread.join()
    for code in codes:
        shell.status.set(code)
    return shell.status.code


def execute(shell: Shell, table: list[Command]) -> int:
    """Read here-documents, then run a single command or a pipeline.

    Nothing runs after a syntax error. Returns the exit status.
    """
    if shell.syntax_error or not table:
        return shell.status.code
    try:
        prepare_heredocs(table, shell.env)
    except ShellError as err:
        return shell.status.report(err.code, err.subject)
    if len(table) == 1:
        return execute_single(shell, table[0])
    return execute_pipeline(shell, table)