# process.py
# Runs the external processes of a step. Any failure ends the whole build.

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Mapping, NoReturn, Sequence

from .errors import StepFailure
from .ui.console import get_console


FATAL_EXIT_CODE = 0xFF


def fatal(failure: StepFailure) -> NoReturn:
    """Report a process failure and abort the build with FATAL_EXIT_CODE."""
    get_console().print_failure(
        failure.step,
        failure.phase,
        failure.condition,
        cmd=failure.cmd,
    )
    raise SystemExit(FATAL_EXIT_CODE) from failure


def run_process(
    argv: Sequence[str],
    *,
    cwd: str | Path,
    env: Mapping[str, str],
    step: str = "",
    phase: str = "",
) -> int:
    """
    Run argv[0] with argv[1:] and block until it exits.

    - stdin is closed, the child can never wait on interactive input
    - stdout/stderr are inherited, so git's own progress output shows up
    - env is the build's environment, not whatever the caller has

    Returns the exit status (always 0). A nonzero exit, a signal, or a
    failure to spawn prints a diagnostic and raises SystemExit(FATAL_EXIT_CODE).
    There is no retry and nothing on disk is rolled back.
    """
    argv = [str(a) for a in argv]
    cmd = shlex.join(argv)
    get_console().print_run(argv, str(cwd))

    try:
        proc = subprocess.run(
            argv,
            cwd=str(cwd),
            env=dict(env),
            stdin=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        fatal(StepFailure(step=step, phase=phase, cmd=cmd, reason=f"failed to start: {e}"))

    if proc.returncode < 0:
        fatal(StepFailure(step=step, phase=phase, cmd=cmd, signal=-proc.returncode))
    if proc.returncode != 0:
        fatal(StepFailure(step=step, phase=phase, cmd=cmd, exit_code=proc.returncode))

    return proc.returncode
