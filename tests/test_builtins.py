import io
import os

import pytest

from trexshell.builtins import (
    ShellExit,
    cd,
    check_is_builtin,
    echo,
    env,
    execute_builtin,
    exit_shell,
    export,
    pwd,
    set_local_var,
    show_locals,
    unset,
)
from trexshell.hashtable import HashTable
from trexshell.state import (
    NO_FILE_OR_DIR,
    NOT_VALID_IDENT,
    NUMERIC_ARG,
    TOO_MANY_ARGS,
    Shell,
)


def make_shell(**variables):
    table = HashTable(16)
    for key, value in variables.items():
        table.insert(key, value)
    return Shell(env=table, stdout=io.StringIO(), stderr=io.StringIO())


def test_echo_prints_words_with_trailing_spaces():
    shell = make_shell()
    shell.status = 7
    assert echo(shell, ["echo", "a", "b"]) == 1
    assert shell.stdout.getvalue() == "a b \n"
    assert shell.status == 0


def test_echo_n_flag_drops_newline():
    shell = make_shell()
    echo(shell, ["echo", "-n", "hi"])
    assert shell.stdout.getvalue() == "hi "


def test_echo_without_words_prints_newline():
    shell = make_shell()
    echo(shell, ["echo"])
    assert shell.stdout.getvalue() == "\n"


def test_cd_to_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    shell = make_shell()
    assert cd(shell, ["cd", str(target)]) == 1
    assert os.path.samefile(os.getcwd(), target)
    assert shell.stderr.getvalue() == ""


def test_cd_without_argument_goes_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    shell = make_shell(HOME=str(home))
    assert cd(shell, ["cd"]) == 1
    assert os.path.samefile(os.getcwd(), home)
    assert shell.stderr.getvalue() == ""


def test_cd_missing_directory_reports_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = make_shell()
    cd(shell, ["cd", str(tmp_path / "missing")])
    assert shell.stderr.getvalue() == f"minishell: cd: {NO_FILE_OR_DIR}\n"
    assert shell.status == 1
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_cd_without_home_reports_error():
    shell = make_shell()
    cd(shell, ["cd"])
    assert shell.status == 1
    assert NO_FILE_OR_DIR in shell.stderr.getvalue()


def test_env_prints_every_entry():
    shell = make_shell(A="1", B="two")
    assert env(shell, ["env"]) == 1
    lines = shell.stdout.getvalue().splitlines()
    assert sorted(lines) == ["A=1", "B=two"]


def test_show_locals_prints_local_variables():
    shell = make_shell()
    shell.local_vars.insert("X", "y")
    show_locals(shell, ["set"])
    assert shell.stdout.getvalue() == "X=y\n"


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = make_shell()
    assert pwd(shell, ["pwd"]) == 1
    assert shell.stdout.getvalue() == os.getcwd() + "\n"


def test_export_assignment_sets_both_tables():
    shell = make_shell()
    assert export(shell, ["export", "NAME=value"]) == 0
    assert shell.env.search("NAME") == "value"
    assert shell.local_vars.search("NAME") == "value"


def test_export_existing_local_variable():
    shell = make_shell()
    shell.local_vars.insert("LOCAL", "v")
    export(shell, ["export", "LOCAL"])
    assert shell.env.search("LOCAL") == "v"


def test_export_unknown_name_changes_nothing():
    shell = make_shell()
    export(shell, ["export", "UNKNOWN"])
    assert "UNKNOWN" not in shell.env
    assert len(shell.local_vars) == 0


def test_export_invalid_identifier():
    shell = make_shell()
    assert export(shell, ["export", "a?b=1"]) == 1
    assert shell.status == 1
    assert shell.stderr.getvalue() == f"minishell: export: {NOT_VALID_IDENT}\n"
    assert len(shell.env) == 0


def test_unset_removes_from_both_tables():
    shell = make_shell(K="1")
    shell.local_vars.insert("K", "1")
    assert unset(shell, ["unset", "K"]) == 0
    assert "K" not in shell.env
    assert "K" not in shell.local_vars


def test_unset_rejects_question_mark():
    shell = make_shell(K="1")
    assert unset(shell, ["unset", "a?"]) == 1
    assert shell.stderr.getvalue() == "a?: not a valid identifier\n"
    assert shell.env.search("K") == "1"


def test_exit_without_argument_uses_status():
    shell = make_shell()
    shell.status = 4
    with pytest.raises(ShellExit) as caught:
        exit_shell(shell, ["exit"])
    assert caught.value.code == 4
    assert shell.stdout.getvalue() == "exit\n"


def test_exit_with_numeric_argument():
    shell = make_shell()
    with pytest.raises(ShellExit) as caught:
        exit_shell(shell, ["exit", "42"])
    assert caught.value.code == 42


def test_exit_with_non_numeric_argument():
    shell = make_shell()
    with pytest.raises(ShellExit) as caught:
        exit_shell(shell, ["exit", "abc"])
    assert caught.value.code == 2
    assert shell.stderr.getvalue() == f"minishell: exit: {NUMERIC_ARG}\n"


def test_exit_with_too_many_arguments_stays():
    shell = make_shell()
    assert exit_shell(shell, ["exit", "1", "2"]) == 2
    assert shell.status == 1
    assert shell.stderr.getvalue() == f"minishell: exit: {TOO_MANY_ARGS}\n"


def test_set_local_var_stores_assignment():
    shell = make_shell()
    set_local_var(shell, ["A=b=c"])
    assert shell.local_vars.search("A") == "b=c"
    assert "A" not in shell.env


def test_set_local_var_updates_existing_env():
    shell = make_shell(A="old")
    set_local_var(shell, ["A=new"])
    assert shell.env.search("A") == "new"


def test_set_local_var_ignores_assignment_with_command():
    shell = make_shell()
    set_local_var(shell, ["A=1", "echo"])
    assert "A" not in shell.local_vars


@pytest.mark.parametrize(
    "name", ["cd", "exit", "pwd", "env", "export", "unset", "echo"]
)
def test_check_is_builtin_known(name):
    assert check_is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "set", "", "ECHO"])
def test_check_is_builtin_unknown(name):
    assert check_is_builtin(name) is False


def test_execute_builtin_dispatches():
    shell = make_shell()
    assert execute_builtin("echo", shell, ["echo", "x"]) == 1
    assert shell.stdout.getvalue() == "x \n"


def test_execute_builtin_unknown_raises():
    with pytest.raises(ValueError):
        execute_builtin("ls", make_shell(), ["ls"])