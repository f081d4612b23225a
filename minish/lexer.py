"""Turning an input line into a checked list of tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .errors import ErrorCode, ShellError, Status

_WHITESPACE = "\n\t "
_OPERATORS = "<>|"
_QUOTES = "'\""
_DOUBLE_OPERATORS = ("<<", ">>")


def is_special(char: str) -> bool:
    """True for an operator or quote character."""
    return len(char) == 1 and (char in _OPERATORS or char in _QUOTES)


def is_special_no_quotes(char: str) -> bool:
    """True for an operator character: '<', '>' or '|'."""
    return len(char) == 1 and char in _OPERATORS


def is_wspace(char: str) -> bool:
    """True for a space, tab or newline."""
    return len(char) == 1 and char in _WHITESPACE


class TokenType(Enum):
    """Kinds of token in a command line."""

    WORD = "word"
    PIPE = "pipe"
    REDIRECT_IN = "redirect_in"
    REDIRECT_OUT = "redirect_out"
    HEREDOC = "heredoc"
    APPEND = "append"


_REDIRECTIONS = frozenset(
    {
        TokenType.REDIRECT_IN,
        TokenType.REDIRECT_OUT,
        TokenType.HEREDOC,
        TokenType.APPEND,
    }
)


@dataclass(frozen=True)
class Token:
    """One token of a command line with the text it came from."""

    type: TokenType
    value: str

    @property
    def is_redirection(self) -> bool:
        return self.type in _REDIRECTIONS

    @property
    def is_pipe(self) -> bool:
        return self.type is TokenType.PIPE


def normalise_spaces(text: str) -> str:
    """Collapse whitespace to single spaces and set operators apart.

    Quoted sections are kept as they are. An unclosed quote raises
    ShellError with the quote character as subject.
    """
    text = text.strip(_WHITESPACE)
    parts: list[str] = []
    after_space = False
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if char in _QUOTES:
            end = text.find(char, i + 1)
            if end == -1:
                raise ShellError(ErrorCode.SYNTAX_ERROR, char)
            parts.append(text[i:end + 1])
            i = end + 1
            after_space = False
        elif is_special_no_quotes(char):
            if parts and not is_wspace(parts[-1][-1]):
                parts.append(" ")
            pair = text[i:i + 2]
            operator = pair if pair in _DOUBLE_OPERATORS else char
            parts.append(operator)
            i += len(operator)
            if i < n:
                parts.append(" ")
            after_space = True
        elif is_wspace(char):
            if not after_space and parts:
                parts.append(" ")
                after_space = True
            i += 1
        else:
            parts.append(char)
            after_space = False
            i += 1
    return "".join(parts).strip(_WHITESPACE)


def split_space_quotes(text: str) -> list[str]:
    """Split on spaces, keeping quoted sections inside their word."""
    words: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        while i < n and text[i] == " ":
            i += 1
        if i >= n:
            break
        start = i
        while i < n and text[i] != " ":
            if text[i] in _QUOTES:
                end = text.find(text[i], i + 1)
                i = n if end == -1 else end + 1
            else:
                i += 1
        words.append(text[start:i])
    return words


def classify(word: str) -> TokenType:
    """The token type a word stands for."""
    if word.startswith("|"):
        return TokenType.PIPE
    if word.startswith("<<"):
        return TokenType.HEREDOC
    if word.startswith(">>"):
        return TokenType.APPEND
    if word.startswith("<"):
        return TokenType.REDIRECT_IN
    if word.startswith(">"):
        return TokenType.REDIRECT_OUT
    return TokenType.WORD


def tokenise(words: Iterable[str]) -> list[Token]:
    """Turn words into tokens, in order."""
    return [Token(classify(word), word) for word in words]


def check_syntax(tokens: list[Token]) -> None:
    """Raise ShellError at the first misplaced operator."""
    if not tokens:
        return
    if tokens[0].is_pipe:
        raise ShellError(ErrorCode.SYNTAX_ERROR, "|")
    followers: list[Optional[Token]] = [*tokens[1:], None]
    for token, following in zip(tokens, followers):
        if token.is_redirection:
            if following is None:
                raise ShellError(ErrorCode.SYNTAX_ERROR, "newline")
            if following.is_redirection or following.is_pipe:
                raise ShellError(ErrorCode.SYNTAX_ERROR, following.value)
        elif token.is_pipe:
            if following is None or following.is_pipe:
                raise ShellError(ErrorCode.SYNTAX_ERROR, "|")


def lex(line: str, status: Status) -> Optional[list[Token]]:
    """Tokenise and check a line.

    Returns the tokens, or None after reporting a syntax error to status.
    """
    try:
        tokens = tokenise(split_space_quotes(normalise_spaces(line)))
        check_syntax(tokens)
    except ShellError as err:
        status.report(err.code, err.subject)
        return None
    return tokens