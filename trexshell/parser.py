"""Run a token list: split it at pipes, apply redirections and run each command."""

from __future__ import annotations

import os
import signal
import sys
import tempfile
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from itertools import takewhile

from .executor import execute
from .state import Shell
from .tokenizer import Token, TokenType

ReadInput = Callable[[str], str]

_OUTPUT_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_APPEND_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_APPEND
_INPUT_FLAGS = os.O_RDONLY | os.O_CREAT
_FILE_MODE = 0o777
_HEREDOC_PROMPT = "> "
_HEREDOC_EOF_WARNING = "minishell: Warning: here-document delimited by EOF"


def _flush(shell: Shell) -> None:
    shell.stdout.flush()
    if sys.stdout is not None:
        sys.stdout.flush()


def create_command_array(tokens: Sequence[Token]) -> list[str]:
    """Return the leading run of word tokens as the command's arguments."""
    return [
        token.value
        for token in takewhile(lambda token: token.type is TokenType.WORD, tokens)
    ]


def split_pipeline(tokens: Sequence[Token]) -> list[tuple[list[Token], bool]]:
    """Split ``tokens`` at pipes into ``(segment, followed_by_pipe)`` pairs."""
    segments: list[tuple[list[Token], bool]] = []
    current: list[Token] = []
    for token in tokens:
        if token.type is TokenType.PIPE:
            segments.append((current, True))
            current = []
        else:
            current.append(token)
    if tokens:
        segments.append((current, False))
    return segments


def _open_onto(shell: Shell, target_fd: int, filename: str, flags: int) -> None:
    _flush(shell)
    try:
        file_fd = os.open(filename, flags, _FILE_MODE)
    except OSError as exc:
        shell.error("redirect", exc.strerror or str(exc), 1)
        return
    try:
        os.dup2(file_fd, target_fd)
    finally:
        os.close(file_fd)


@contextmanager
def _sigint_raises() -> Iterator[None]:
    """Let Ctrl-C interrupt reading with KeyboardInterrupt."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def here_doc_input(
    shell: Shell,
    delimiter: str,
    saved_fds: tuple[int, int],
    read_input: ReadInput = input,
) -> None:
    """Read lines up to ``delimiter`` and make them the standard input."""
    lines: list[str] = []
    _flush(shell)
    current_out = os.dup(1)
    os.dup2(saved_fds[1], 1)
    try:
        with _sigint_raises():
            while True:
                try:
                    line = read_input(_HEREDOC_PROMPT)
                except EOFError:
                    print(_HEREDOC_EOF_WARNING, file=shell.stderr)
                    break
                if line == delimiter:
                    break
                lines.append(line)
    except KeyboardInterrupt:
        shell.stdout.write("\n")
        lines = []
        shell.status = 130
    finally:
        _flush(shell)
        os.dup2(current_out, 1)
        os.close(current_out)
    try:
        with tempfile.TemporaryFile("w+b") as document:
            document.write("".join(f"{line}\n" for line in lines).encode("utf-8"))
            document.flush()
            document.seek(0)
            os.dup2(document.fileno(), 0)
    except OSError as exc:
        shell.error("redirect", exc.strerror or str(exc), 1)


def check_redirects(
    shell: Shell,
    tokens: Sequence[Token],
    saved_fds: tuple[int, int],
    read_input: ReadInput = input,
) -> None:
    """Apply every redirection operator followed by a word, left to right."""
    for current, following in zip(tokens, tokens[1:]):
        if following.type is not TokenType.WORD:
            continue
        if current.type is TokenType.OREDIRECT:
            _open_onto(shell, 1, following.value, _OUTPUT_FLAGS)
        elif current.type is TokenType.IREDIRECT:
            _open_onto(shell, 0, following.value, _INPUT_FLAGS)
        elif current.type is TokenType.OAPPEND:
            _open_onto(shell, 1, following.value, _APPEND_FLAGS)
        elif current.type is TokenType.HERE_DOC:
            here_doc_input(shell, following.value, saved_fds, read_input)


def _create_pipe(has_pipe: bool, last_pipe_in: int) -> int:
    if last_pipe_in != 0:
        os.dup2(last_pipe_in, 0)
        os.close(last_pipe_in)
    if not has_pipe:
        return 0
    read_end, write_end = os.pipe()
    os.dup2(write_end, 1)
    os.close(write_end)
    return read_end


@contextmanager
def _builtin_output(shell: Shell, original_stdout: int) -> Iterator[None]:
    """Send builtin output to file descriptor 1 while it is redirected."""
    if os.path.samestat(os.fstat(1), os.fstat(original_stdout)):
        yield
        return
    stream = open(os.dup(1), "w", encoding="utf-8", errors="replace", closefd=True)
    previous = shell._stdout
    shell._stdout = stream
    try:
        yield
    finally:
        shell._stdout = previous
        stream.close()


def command_parser(
    shell: Shell,
    tokens: Sequence[Token],
    has_pipe: bool,
    last_pipe_in: int,
    read_input: ReadInput = input,
) -> int:
    """Run one pipeline segment; return the read end of its outgoing pipe, or 0."""
    _flush(shell)
    saved = (os.dup(0), os.dup(1))
    try:
        last_pipe_in = _create_pipe(has_pipe, last_pipe_in)
        check_redirects(shell, tokens, saved, read_input)
        command = create_command_array(tokens)
        with _builtin_output(shell, saved[1]):
            execute(shell, command)
    finally:
        _flush(shell)
        os.dup2(saved[0], 0)
        os.dup2(saved[1], 1)
        os.close(saved[0])
        os.close(saved[1])
    return last_pipe_in


def parse_tokens(
    shell: Shell, tokens: Sequence[Token], read_input: ReadInput = input
) -> None:
    """Run a whole command line, one pipeline segment after another."""
    last_pipe_in = 0
    try:
        for segment, has_pipe in split_pipeline(tokens):
            last_pipe_in = command_parser(
                shell, segment, has_pipe, last_pipe_in, read_input
            )
    finally:
        if last_pipe_in != 0:
            os.close(last_pipe_in)