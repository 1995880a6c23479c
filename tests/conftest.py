from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from sparsedep.build import Build
from sparsedep.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def _fresh_console():
    set_console(Console())
    yield
    set_console(Console())


class RecordingRunner:
    """Stands in for run_process; optionally creates the clone destination."""

    def __init__(self, materialize: bool = True):
        self.materialize = materialize
        self.calls: List[dict] = []

    def __call__(self, argv, *, cwd, env, step="", phase=""):
        self.calls.append({"argv": list(argv), "cwd": Path(cwd), "phase": phase})
        if self.materialize and argv[1] == "clone":
            Path(argv[6]).mkdir(parents=True)
        return 0

    @property
    def argvs(self):
        return [c["argv"] for c in self.calls]


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def build(tmp_path: Path) -> Build:
    return Build(tmp_path, env={"PATH": ""})
