"""Core of a small shell: lexer, expansion, builtins, here-documents and executor."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "directory",
    "environment",
    "errors",
    "executor",
    "expansion",
    "exporting",
    "heredoc",
    "lexer",
    "models",
    "paths",
]