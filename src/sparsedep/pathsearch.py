# pathsearch.py
# Locates executables by scanning a search-path value ourselves instead of
# letting the OS resolve them, so every platform behaves the same way.

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import ExecutableNotFound, NoSearchPath


SEARCH_PATH_VARIABLE = "PATH"


def search_path_separator() -> str:
    """
    Separator between search-path segments.

    Based on the machine running the build, never the target machine.
    """
    return ";" if os.name == "nt" else ":"


def git_exe_name() -> str:
    """Default git executable file name, including the platform suffix."""
    return "git.exe" if os.name == "nt" else "git"


def get_search_path(env: Mapping[str, str], variable: str = SEARCH_PATH_VARIABLE) -> str:
    """Read the search-path value out of `env`; raise NoSearchPath if it is missing."""
    value = env.get(variable)
    if value is None:
        raise NoSearchPath(variable)
    return value


def resolve(search_path: Optional[str], separator: str, exe_name: str) -> str:
    """
    Find `exe_name` under the directories listed in `search_path`.

    Checks every non-empty segment in order and returns the first existing
    candidate as an absolute path, just like an operating system would
    resolve an executable name.

    **Important:** no executable suffix is appended. `exe_name` must already
    carry one where the platform uses it (`git.exe` on Windows).

    Args:
        search_path: the raw search-path value, or None if the variable is absent
        separator: segment separator (see search_path_separator())
        exe_name: executable file name

    Raises:
        NoSearchPath: search_path is None
        ExecutableNotFound: no segment contains exe_name
    """
    if search_path is None:
        raise NoSearchPath()

    searched: list[str] = []
    for segment in search_path.split(separator):
        # skip the empty splits ("a::b", trailing separator)
        if not segment:
            continue
        searched.append(segment)

        candidate = Path(segment) / exe_name
        if candidate.exists():
            # return a fresh string, detached from the search-path value
            return str(candidate.absolute())

    raise ExecutableNotFound(exe_name, searched)


def search_for_executable(env: Mapping[str, str], exe_name: str | None = None) -> str:
    """Resolve `exe_name` (default: git) using the search path found in `env`."""
    return resolve(
        get_search_path(env),
        search_path_separator(),
        exe_name or git_exe_name(),
    )
