"""Variable and exit-status expansion, and quote removal."""

from __future__ import annotations

from typing import Iterable

from .environment import Environment
from .lexer import is_wspace
from .models import Command, Shell

_QUOTE_CHARS = ("'", '"')


def is_quotes(char: str) -> bool:
    """True for a single or double quote."""
    return char in _QUOTE_CHARS


def _is_alnum(char: str) -> bool:
    return len(char) == 1 and char.isascii() and char.isalnum()


def contains_dollar(text: str, index: int) -> bool:
    """True if a '$' follows index before the next double quote."""
    start = index + 1 if text[index:index + 1] == '"' else index
    end = text.find('"', start)
    segment = text[start:] if end == -1 else text[start:end]
    return "$" in segment


def _key_end(text: str, start: int) -> int:
    end = start
    while end < len(text):
        char = text[end]
        if is_quotes(char) or char == "$" or is_wspace(char):
            break
        end += 1
    return end


def _substitute(text: str, k: int, env: Environment, last_status: int) -> tuple[str, int]:
    """Replace the expansion starting with '$' at k; return text and next index."""
    following = text[k + 1:k + 2]
    if _is_alnum(following):
        end = _key_end(text, k + 1)
        value = env.expand_variable(text[k + 1:end])
    elif following == "?":
        end = k + 2
        value = str(last_status)
    else:
        return text, k + 1
    return text[:k] + value + text[end:], k + len(value)


def _expand_double_quoted(
    text: str, k: int, env: Environment, last_status: int
) -> tuple[str, int]:
    quote = text[k]
    k += 1
    while k < len(text) and text[k] != quote:
        if text[k] == "$":
            text, k = _substitute(text, k, env, last_status)
        else:
            k += 1
    if text[k:k + 1] == '"':
        k += 1
    return text, k


def _skip_single_quoted(text: str, k: int) -> int:
    end = text.find("'", k + 1)
    return len(text) if end == -1 else end + 1


def expand_argument(arg: str, env: Environment, last_status: int) -> str:
    """Expand $NAME and $? in one word, leaving single-quoted parts alone."""
    text = arg
    k = 0
    while k < len(text):
        char = text[k]
        if char == '"' and contains_dollar(text, k):
            text, k = _expand_double_quoted(text, k, env, last_status)
        elif char == "'":
            k = _skip_single_quoted(text, k)
        elif char == "$":
            text, k = _substitute(text, k, env, last_status)
        else:
            k += 1
    return text


def _strip_quotes(arg: str) -> tuple[str, bool]:
    parts: list[str] = []
    had_quotes = False
    j = 0
    n = len(arg)
    while j < n:
        if arg[j] == "$" and is_quotes(arg[j + 1:j + 2]):
            j += 1
        char = arg[j]
        if is_quotes(char):
            had_quotes = True
            end = arg.find(char, j + 1)
            if end == -1:
                end = n
            parts.append(arg[j + 1:end])
            j = end + 1
        else:
            parts.append(char)
            j += 1
    return "".join(parts), had_quotes


def remove_outer_quotes(arg: str) -> str:
    """Drop quote pairs from a word, and a '$' directly before a quote."""
    return _strip_quotes(arg)[0]


def _strip_all(words: Iterable[str]) -> tuple[list[str], bool]:
    results = [_strip_quotes(word) for word in words]
    return [text for text, _ in results], any(had for _, had in results)


def expand_table(shell: Shell, table: list[Command]) -> None:
    """Expand arguments and remove quotes in every command of a table.

    Does nothing after a syntax error. On success the exit status is reset to 0.
    """
    if shell.syntax_error:
        return
    for command in table:
        command.args = [
            expand_argument(arg, shell.env, shell.status.code) for arg in command.args
        ]
    removed = False
    for command in table:
        command.args, args_quoted = _strip_all(command.args)
        command.filenames, files_quoted = _strip_all(command.filenames)
        removed = removed or args_quoted or files_quoted
    shell.quotes_removed = removed
    shell.status.set(0)