# minish

`minish` is a library that holds the core of a small shell. It handles a command line in these stages:

1. **Lexing.** The line is split into words and operators (`|`, `<`, `>`, `<<`, `>>`). Quoted sections stay whole, and the syntax is checked.
2. **Expansion.** Outside single quotes, `$NAME` and `$?` are replaced. Quote pairs are then removed.
3. **Here-documents.** The text for each `<< DELIM` is read and expanded. It is stored in a temporary file.
4. **Builtins.** `echo`, `cd`, `pwd`, `export`, `unset`, `env` and `exit` run inside the shell.
5. **Other commands.** These run as child processes. They are found through `PATH`, connected by pipes, and given `<`, `>` and `>>` redirections.

The package uses only the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `minish.errors` | `ErrorCode`, `ShellError`, `format_error`, and `Status`. `Status` holds the last exit status and prints error messages. |
| `minish.environment` | `Environment`, an ordered list of `NAME=value` or bare `NAME` entries. Also the helpers `key_length`, `has_equal` and `valid_key_name`. |
| `minish.paths` | `is_path`, `resolve_path` and `check_command`. |
| `minish.lexer` | `TokenType`, `Token`, `is_special`, `is_special_no_quotes`, `is_wspace`, `normalise_spaces`, `split_space_quotes`, `classify`, `tokenise`, `check_syntax` and `lex`. |
| `minish.models` | `Command` (one pipeline stage), `Shell` (the running state) and `cleanup_table`. |
| `minish.expansion` | `is_quotes`, `contains_dollar`, `expand_argument`, `remove_outer_quotes` and `expand_table`. |
| `minish.exporting` | `export`, `unset`, `print_env`, `print_exports` and `sorted_entries`. |
| `minish.directory` | `cd` and `pwd`. |
| `minish.builtins` | `echo`, `is_only_n`, `split_echo_arg`, `exit_builtin`, `is_numeric`, `is_builtin` and `run_builtin`. |
| `minish.heredoc` | `expand_heredoc_line`, `heredoc_file_path`, `collect_heredoc` and `prepare_heredocs`. |
| `minish.executor` | `check_files`, `execute_single`, `execute_pipeline` and `execute`. |

## A short tour

```python
from minish.environment import Environment
from minish.errors import Status
from minish.lexer import lex, normalise_spaces
from minish.expansion import expand_argument, remove_outer_quotes
from minish.builtins import echo, is_builtin

print(normalise_spaces("ls -l|grep py>out.txt"))   # ls -l | grep py > out.txt

status = Status()
tokens = lex('echo "hello   world" | wc -c', status)  # list of Token, or None on a syntax error

env = Environment(["HOME=/home/user", "PATH=/usr/bin:/bin", "SHLVL=1"])
env.increment_shlvl()
print(env.lookup("SHLVL"))                          # 2

arg = expand_argument('"$HOME"/docs', env, 0)       # '"/home/user"/docs'
print(remove_outer_quotes(arg))                     # /home/user/docs

print(is_builtin("cd"))                             # True
echo(["-n", "no", "newline"])                       # prints without a trailing newline
```

## Running commands

The executor takes a table of `Command` objects. Each one has these fields:

- `args`: the words of the command.
- `redirections`: the operators, such as `<`, `>`, `>>` and `<<`.
- `filenames`: the file name or delimiter for each operator, in the same order as `redirections`.

```python
import os

from minish.models import Command, Shell
from minish.expansion import expand_table
from minish.executor import execute

shell = Shell.from_entries(f"{k}={v}" for k, v in os.environ.items())
table = [
    Command(args=["ls", "-l"]),
    Command(args=["wc", "-l"], redirections=[">"], filenames=["count.txt"]),
]
expand_table(shell, table)
code = execute(shell, table)
```

`execute` first reads every here-document and writes it to a file. By default each file is named `minish-heredoc-<n>` in the system temporary directory, and the lines come from the terminal with a `> ` prompt. To supply the lines yourself, call `prepare_heredocs` with a `reader`.

After the here-documents are read, `execute` runs the table:

- **A single command.** It goes to `execute_single`. A builtin runs in the shell itself, so `cd`, `export` and `unset` change `shell.env`.
- **A longer table.** It goes to `execute_pipeline`. Each builtin stage there works on a copy of the shell, so its changes are not kept.

The returned status is also kept in `shell.status`. The helpers `Command.cleanup` and `cleanup_table` delete the here-document files.

## Errors and exit status

Errors follow shell conventions. Errors are reported on standard error, and the resulting exit status is recorded in `Status`:

| Situation | Status |
| --- | --- |
| Syntax error | 2 |
| Command not found | 127 |
| Command found but not executable, or a directory | 126 |
| Invalid `export` identifier or failed `cd` | 1 |

Internally, functions raise `ShellError`. Its `code` is an `ErrorCode` or an errno value. `format_error` gives the message line for a code.

## What it does not do

`minish` has no command-line program and no read–eval loop. It also does not build `Command` tables from tokens, so a caller that wants to run a line must group the tokens into `Command` objects itself. Other features are absent as well:

- signal handling at a prompt
- command history
- job control
- shell syntax beyond pipes and the four redirections

## Running the tests

Install the package with the `test` extra. Then run `pytest` from the project root.