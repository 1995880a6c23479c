# build.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from .dag import BuildGraph, run_graph
from .model import Action, SparseCheckoutOptions
from .step_workflows.sparse_checkout import Runner, SparseCheckoutStep


class Build:
    """
    Everything a build file gets to work with.

    build_root: absolute directory the build runs in ("dep/" lives under it)
    env:        environment for executable lookup and for every child process;
                a snapshot of os.environ unless given explicitly
    graph:      the BuildGraph the steps are registered into
    """

    def __init__(self, build_root: str | Path = ".", env: Optional[Mapping[str, str]] = None):
        self.build_root = Path(build_root).expanduser().absolute()
        self.env: Dict[str, str] = dict(os.environ if env is None else env)
        self.graph = BuildGraph()

    def add_step(self, name: str, action: Optional[Action] = None, needs: Iterable[int] = ()) -> int:
        """Register a generic step; returns its node handle."""
        handle = self.graph.add_node(name, action)
        for dep in needs:
            self.graph.depend_on(handle, dep)
        return handle

    def depend_on(self, node: int, dependency: int) -> None:
        self.graph.depend_on(node, dependency)

    def sparse_checkout(
        self,
        url: str,
        directories: Iterable[str],
        *,
        git_path: str | None = None,
        branch: str | None = None,
        local_path: str | None = None,
        runner: Optional[Runner] = None,
    ) -> SparseCheckoutStep:
        options = SparseCheckoutOptions(
            url=url,
            directories=tuple(directories),
            git_path=git_path,
            branch=branch,
            local_path=local_path,
        )
        return SparseCheckoutStep.create(self, options, runner=runner)

    def run(self, max_workers: int | None = None) -> Dict[str, str]:
        return run_graph(self.graph, max_workers=max_workers)
