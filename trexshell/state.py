"""Shell-wide state: environment, local variables and last exit status."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Mapping
from typing import TextIO

from .hashtable import HashTable, env_to_hashtable

LOCAL_HASHTABLE_SIZE = 50

NOT_FOUND = "command not found."
NO_FILE_OR_DIR = "no such file or directory."
NOT_VALID_IDENT = "not a valid identifier"
NUMERIC_ARG = "numeric argument required"
TOO_MANY_ARGS = "Too many arguments"


class Shell:
    """The state one shell session works on."""

    def __init__(
        self,
        env: HashTable | None = None,
        local_vars: HashTable | None = None,
        status: int = 0,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.env = env if env is not None else HashTable(LOCAL_HASHTABLE_SIZE)
        self.local_vars = (
            local_vars if local_vars is not None else HashTable(LOCAL_HASHTABLE_SIZE)
        )
        self.status = status
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | Iterable[str] | None = None
    ) -> Shell:
        """Create a shell whose environment is ``environ`` (default: the process's)."""
        if environ is None:
            environ = os.environ
        if isinstance(environ, Mapping):
            entries = [f"{key}={value}" for key, value in environ.items()]
        else:
            entries = list(environ)
        return cls(
            env=env_to_hashtable(entries),
            local_vars=HashTable(LOCAL_HASHTABLE_SIZE),
        )

    def error(self, command: str, message: str, status: int) -> None:
        """Report ``command: message`` on stderr and record ``status``."""
        print(f"minishell: {command}: {message}", file=self.stderr)
        self.status = status

    def lookup(self, key: str) -> str | None:
        """Return a variable from the environment, else from the local variables."""
        value = self.env.search(key)
        if value is None:
            value = self.local_vars.search(key)
        return value