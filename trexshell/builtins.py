"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence

from .hashtable import find_key, find_value
from .state import NO_FILE_OR_DIR, NOT_VALID_IDENT, NUMERIC_ARG, TOO_MANY_ARGS, Shell

_DIGITS = "0123456789"


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def _write(shell: Shell, text: str) -> None:
    shell.stdout.write(text)
    shell.stdout.flush()


def cd(shell: Shell, args: Sequence[str]) -> int:
    """Change directory to ``args[1]``, or to ``$HOME`` without an argument."""
    target = args[1] if len(args) > 1 else shell.env.search("HOME")
    try:
        if target is None:
            raise FileNotFoundError("HOME is not set")
        os.chdir(target)
    except OSError:
        shell.error("cd", NO_FILE_OR_DIR, 1)
    return 1


def echo(shell: Shell, args: Sequence[str]) -> int:
    """Print the arguments, each followed by a space; ``-n`` drops the newline."""
    words = list(args[1:])
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    text = "".join(f"{word} " for word in words)
    _write(shell, text + ("\n" if newline else ""))
    shell.status = 0
    return 1


def env(shell: Shell, args: Sequence[str]) -> int:
    """Print the environment as ``KEY=VALUE`` lines."""
    _write(shell, "".join(f"{line}\n" for line in shell.env.to_array()))
    return 1


def exit_shell(shell: Shell, args: Sequence[str]) -> int:
    """Leave the shell, with an optional numeric status."""
    if len(args) > 1:
        code = args[1]
        if any(char not in _DIGITS for char in code):
            _write(shell, "exit\n")
            shell.error("exit", NUMERIC_ARG, 2)
            raise ShellExit(shell.status)
        shell.status = int(code) if code else 0
    if len(args) > 2:
        shell.error("exit", TOO_MANY_ARGS, 1)
        return 2
    _write(shell, "exit\n")
    raise ShellExit(shell.status)


def _has_invalid_name(text: str) -> bool:
    name = text.partition("=")[0]
    return " " in name or "?" in name


def export(shell: Shell, args: Sequence[str]) -> int:
    """Put ``KEY=VALUE`` pairs, or existing local variables, into the environment."""
    for arg in args[1:]:
        if _has_invalid_name(arg):
            shell.error("export", NOT_VALID_IDENT, 1)
            return 1
        if "=" in arg:
            key, value = find_key(arg), find_value(arg)
        else:
            key = arg
            value = shell.local_vars.search(key)
            if value is None:
                continue
        shell.local_vars.insert(key, value)
        shell.env.insert(key, value)
    return 0


def pwd(shell: Shell, args: Sequence[str]) -> int:
    """Print the current working directory."""
    _write(shell, f"{os.getcwd()}\n")
    return 1


def show_locals(shell: Shell, args: Sequence[str]) -> int:
    """Print the local variables as ``KEY=VALUE`` lines."""
    _write(shell, "".join(f"{line}\n" for line in shell.local_vars.to_array()))
    return 1


def unset(shell: Shell, args: Sequence[str]) -> int:
    """Remove variables from the environment and from the local variables."""
    for key in args[1:]:
        if "?" in key:
            shell.stderr.write(f"{key}: not a valid identifier\n")
            shell.stderr.flush()
            return 1
        shell.env.delete(key)
        shell.local_vars.delete(key)
    return 0


def set_local_var(shell: Shell, args: Sequence[str]) -> None:
    """Store a lone ``KEY=VALUE`` word as a local variable.

    An environment variable of the same name is updated too.  Nothing is
    stored when the assignment is followed by other words.
    """
    if len(args) > 1:
        return
    key, value = find_key(args[0]), find_value(args[0])
    shell.local_vars.insert(key, value)
    if shell.env.contains(key):
        shell.env.insert(key, value)


_BUILTINS: dict[str, Callable[[Shell, Sequence[str]], int]] = {
    "cd": cd,
    "exit": exit_shell,
    "pwd": pwd,
    "env": env,
    "export": export,
    "unset": unset,
    "echo": echo,
}


def check_is_builtin(name: str) -> bool:
    """Tell whether ``name`` is a builtin command."""
    return name in _BUILTINS


def execute_builtin(name: str, shell: Shell, args: Sequence[str]) -> int:
    """Run the builtin ``name`` with ``args``."""
    try:
        builtin = _BUILTINS[name]
    except KeyError:
        raise ValueError(f"not a builtin: {name!r}") from None
    return builtin(shell, args)