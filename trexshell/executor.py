"""Run one simple command: a local assignment, a builtin or a program."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Sequence

from .builtins import check_is_builtin, execute_builtin, set_local_var
from .path import get_absolute_path
from .state import NOT_FOUND, Shell


def is_local_assignment(args: Sequence[str]) -> bool:
    """Tell whether the first word looks like ``NAME=VALUE``."""
    if not args:
        return False
    name, sep, _ = args[0].partition("=")
    if not sep:
        return False
    return " " not in name and "?" not in name


def launch(shell: Shell, args: Sequence[str]) -> int:
    """Start ``args[0]`` as a program with the shell's environment and wait for it."""
    program = args[0]
    # The program is run exactly as named; no PATH search happens here.
    executable = program if "/" in program else os.path.join(".", program)
    environment = dict(shell.env.items())
    shell.stdout.flush()
    shell.stderr.flush()
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        completed = subprocess.run(
            list(args), executable=executable, env=environment, check=False
        )
    except (OSError, ValueError):
        shell.error(program, NOT_FOUND, 127)
        return 1
    # A program killed by a signal has no exit status of its own.
    shell.status = completed.returncode if completed.returncode >= 0 else 0
    return 1


def _add_path(shell: Shell, args: list[str]) -> list[str]:
    path_variable = shell.env.search("PATH")
    if not args or path_variable is None:
        return args
    resolved = get_absolute_path(args[0], path_variable)
    if resolved is None:
        return args
    return [resolved, *args[1:]]


def execute(shell: Shell, args: Sequence[str]) -> int:
    """Run one command line's words."""
    words = list(args)
    if is_local_assignment(words):
        set_local_var(shell, words)
        words = words[1:]
    if not words:
        return 1
    if check_is_builtin(words[0]):
        return execute_builtin(words[0], shell, words)
    return launch(shell, _add_path(shell, words))