"""The interactive read-and-run loop and its signal handling."""

from __future__ import annotations

import signal
import sys
import threading
from collections.abc import Callable
from typing import TextIO

from .builtins import ShellExit
from .parser import parse_tokens
from .state import Shell
from .tokenizer import tokenize

PROMPT = "\033[1;32mT-Rex\033[1;36mShell\U0001f996\033[0m$ "

_SIGQUIT = getattr(signal, "SIGQUIT", None)


def _write(shell: Shell, text: str) -> None:
    shell.stdout.write(text)
    shell.stdout.flush()


def _on_main_thread() -> bool:
    return threading.current_thread() is threading.main_thread()


def read_line(stream: TextIO | None = None) -> str:
    """Read one line from ``stream`` (default stdin) without its newline."""
    source = sys.stdin if stream is None else stream
    return source.readline().removesuffix("\n")


def loop_signals(shell: Shell) -> None:
    """Handle signals while waiting at the prompt.

    Ctrl-C abandons the current line; the quit signal is ignored.
    """
    if not _on_main_thread():
        return

    def reload_prompt(signum, frame):
        shell.status = 130
        _write(shell, "\n")
        raise KeyboardInterrupt

    signal.signal(signal.SIGINT, reload_prompt)
    if _SIGQUIT is not None:
        signal.signal(_SIGQUIT, signal.SIG_IGN)


def exec_signals(shell: Shell) -> None:
    """Handle signals while a command runs; the shell itself keeps going."""
    if not _on_main_thread():
        return

    def stop_process(signum, frame):
        shell.status = 130
        _write(shell, "\n")

    def quit_process(signum, frame):
        shell.status = 131
        _write(shell, "Quit (core dumped)\n")

    signal.signal(signal.SIGINT, stop_process)
    if _SIGQUIT is not None:
        signal.signal(_SIGQUIT, quit_process)


def run_line(
    shell: Shell, line: str, read_input: Callable[[str], str] = input
) -> int:
    """Run one command line and return the resulting status."""
    parse_tokens(shell, tokenize(line, shell), read_input)
    return shell.status


def loop(shell: Shell, read_input: Callable[[str], str] = input) -> int:
    """Prompt for and run lines until end of input or ``exit``; return the exit code."""
    try:
        while True:
            loop_signals(shell)
            try:
                line = read_input(PROMPT)
            except EOFError:
                _write(shell, "exit\n")
                return 0
            except KeyboardInterrupt:
                shell.status = 130
                continue
            exec_signals(shell)
            run_line(shell, line, read_input)
    except ShellExit as exc:
        return exc.code


def main(argv: list[str] | None = None) -> int:
    """Start an interactive session; command-line arguments are not used."""
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    shell = Shell.from_environ()
    return loop(shell, input)