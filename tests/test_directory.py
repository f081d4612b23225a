import io
import os

from minish.directory import cd, pwd
from minish.environment import Environment
from minish.errors import ErrorCode, Status, format_error


def _status():
    return Status(stream=io.StringIO())


def test_cd_into_directory_updates_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    target = tmp_path / "sub"
    target.mkdir()
    env = Environment(["PWD=" + start, "OLDPWD=old"])
    assert cd(env, [str(target)], _status()) == 0
    assert os.getcwd() == os.path.realpath(target)
    assert env.lookup("OLDPWD") == start
    assert env.lookup("PWD") == os.getcwd()


def test_cd_appends_oldpwd_and_skips_missing_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    (tmp_path / "d").mkdir()
    env = Environment(["HOME=/nowhere"])
    assert cd(env, ["d"], _status()) == 0
    assert env.as_list() == ["HOME=/nowhere", "OLDPWD=" + start]
    assert env.index_of("PWD") is None


def test_cd_without_args_goes_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment(["HOME=" + str(home), "PWD=x"])
    assert cd(env, [], _status()) == 0
    assert os.getcwd() == os.path.realpath(home)
    assert env.lookup("PWD") == os.getcwd()


def test_cd_without_home_reports(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    env = Environment(["PWD=" + start])
    status = _status()
    assert cd(env, [], status) == 1
    assert status.code == 1
    assert status.stream.getvalue() == format_error(ErrorCode.NOT_SET, "HOME") + "\n"
    assert os.getcwd() == start
    assert env.index_of("OLDPWD") is None


def test_cd_with_empty_home_stays(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    env = Environment(["HOME="])
    assert cd(env, [], _status()) == 0
    assert os.getcwd() == start
    assert env.lookup("OLDPWD") == start


def test_cd_missing_directory_reports(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    start = os.getcwd()
    missing = str(tmp_path / "missing")
    env = Environment(["PWD=" + start])
    status = _status()
    assert cd(env, [missing], status) == 1
    assert status.code == 1
    assert status.stream.getvalue() == format_error(
        ErrorCode.DIR_NO_EXIST, missing
    ) + "\n"
    assert os.getcwd() == start
    assert env.as_list() == ["PWD=" + start]


def test_cd_ignores_extra_args(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a").mkdir()
    env = Environment(["X=1"])
    assert cd(env, ["a", "b"], _status()) == 0
    assert os.getcwd() == os.path.realpath(tmp_path / "a")


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert pwd(out, _status()) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_pwd_after_cd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "inner").mkdir()
    cd(Environment(["A=1"]), ["inner"], _status())
    out = io.StringIO()
    pwd(out, _status())
    assert out.getvalue().rstrip("\n") == os.path.realpath(tmp_path / "inner")