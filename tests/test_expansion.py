import pytest

from minish.environment import Environment
from minish.expansion import (
    contains_dollar,
    expand_argument,
    expand_table,
    is_quotes,
    remove_outer_quotes,
)
from minish.models import Command, Shell


@pytest.fixture
def env():
    return Environment(["USER=alice", "HOME=/home/alice", "EMPTY="])


@pytest.mark.parametrize("char,expected", [("'", True), ('"', True), ("a", False), ("$", False)])
def test_is_quotes(char, expected):
    assert is_quotes(char) is expected


def test_contains_dollar_inside_quotes():
    assert contains_dollar('"a$b"', 0) is True
    assert contains_dollar('"ab"$c', 0) is False
    assert contains_dollar("x$y", 0) is True


def test_expand_simple_variable(env):
    assert expand_argument("$USER", env, 0) == "alice"


def test_expand_with_prefix(env):
    assert expand_argument("pre$USER", env, 0) == "pre" + "alice"


def test_expand_adjacent_variables(env):
    assert expand_argument("$USER$USER", env, 0) == "alice" * 2


def test_unknown_variable_becomes_empty(env):
    assert expand_argument("$NOPE", env, 0) == ""


def test_key_runs_until_quote_dollar_or_space(env):
    # The name stops only at quotes, '$' or whitespace.
    assert expand_argument("$USER/x", env, 0) == ""


def test_single_quotes_block_expansion(env):
    assert expand_argument("'$USER'", env, 0) == "'$USER'"


def test_double_quotes_allow_expansion(env):
    assert expand_argument('"$USER"', env, 0) == '"alice"'


def test_exit_status_expansion(env):
    assert expand_argument("$?", env, 42) == str(42)
    assert expand_argument('"x$?"', env, 7) == '"x' + str(7) + '"'


@pytest.mark.parametrize("word", ["$", "$-", "a$", "plain"])
def test_words_without_expansion_unchanged(env, word):
    assert expand_argument(word, env, 0) == word


def test_expanded_value_is_not_rescanned():
    env = Environment(["A=$B", "B=bad"])
    assert expand_argument("$A", env, 0) == "$B"


def test_bare_entry_expands_empty():
    assert expand_argument("$USER", Environment(["USER"]), 0) == ""


def test_remove_outer_quotes_double():
    assert remove_outer_quotes('"hello world"') == "hello world"


def test_remove_outer_quotes_mixed():
    assert remove_outer_quotes("'a'\"b\"c") == "a" + "b" + "c"


def test_remove_outer_quotes_keeps_inner_other_quote():
    assert remove_outer_quotes("\"it's\"") == "it's"


def test_dollar_before_quote_is_dropped():
    assert remove_outer_quotes('$"x"') == "x"


@pytest.mark.parametrize("word", ["abc", "$USER", "a-b", ""])
def test_remove_outer_quotes_identity_without_quotes(word):
    assert remove_outer_quotes(word) == word


def test_expand_table_expands_args_and_strips_files(env):
    shell = Shell(env=env)
    shell.status.set(5)
    command = Command(
        args=["echo", '"$USER"', "'$HOME'"],
        filenames=["'out$USER'"],
        redirections=[">"],
    )
    expand_table(shell, [command])
    assert command.args == ["echo", "alice", "$HOME"]
    assert command.filenames == ["out$USER"]
    assert shell.quotes_removed is True
    assert shell.status.code == 0


def test_expand_table_without_quotes_leaves_flag_false(env):
    shell = Shell(env=env)
    command = Command(args=["echo", "$USER"])
    expand_table(shell, [command])
    assert command.args == ["echo", "alice"]
    assert shell.quotes_removed is False


def test_expand_table_uses_previous_status(env):
    shell = Shell(env=env)
    shell.status.set(3)
    command = Command(args=["echo", "$?"])
    expand_table(shell, [command])
    assert command.args == ["echo", str(3)]


def test_expand_table_skipped_after_syntax_error(env):
    shell = Shell(env=env, syntax_error=True)
    shell.status.set(2)
    command = Command(args=["echo", '"$USER"'])
    expand_table(shell, [command])
    assert command.args == ["echo", '"$USER"']
    assert shell.status.code == 2