"""Resolve a command name against a ``PATH``-style directory list."""

from __future__ import annotations

import os
import stat


def is_executable(path: str) -> bool:
    """Tell whether ``path`` is a non-directory the owner may execute."""
    try:
        mode = os.stat(path).st_mode
    except (OSError, ValueError):
        return False
    if stat.S_ISDIR(mode):
        return False
    return bool(mode & stat.S_IXUSR)


def _candidate(directory: str, command: str) -> str:
    if command.startswith(directory):
        return command
    return f"{directory}/{command}"


def get_absolute_path(command: str, path_variable: str | None) -> str | None:
    """Return the first executable match for ``command``, or None."""
    if path_variable is None:
        return None
    for directory in filter(None, path_variable.split(":")):
        candidate = _candidate(directory, command)
        if is_executable(candidate):
            return candidate
    return None