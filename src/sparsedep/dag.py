# dag.py
from __future__ import annotations

from collections import deque
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from .errors import CircularDependencyDetected
from .model import Action, BuildNode
from .ui.console import get_console


class BuildGraph:
    """
    Arena of build nodes.

    Nodes are addressed by the integer handle returned from add_node(). The
    graph is built once and then only read, except for running the actions.
    """

    def __init__(self) -> None:
        self._nodes: List[BuildNode] = []

    def add_node(self, name: str, action: Optional[Action] = None) -> int:
        if any(n.name == name for n in self._nodes):
            raise ValueError(f"Duplicate build node name: {name!r}")
        handle = len(self._nodes)
        self._nodes.append(BuildNode(id=handle, name=name, action=action))
        return handle

    def node(self, handle: int) -> BuildNode:
        if not 0 <= handle < len(self._nodes):
            raise KeyError(f"unknown build node handle: {handle}")
        return self._nodes[handle]

    def depend_on(self, handle: int, dependency: int) -> None:
        """Declare that `handle` needs `dependency` to run first."""
        node = self.node(handle)
        self.node(dependency)
        if dependency not in node.needs:
            node.needs.append(dependency)

    def __iter__(self):
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


# ----------------------------------------------------------------------
# Reachability (precondition check, not scheduling)
# ----------------------------------------------------------------------

_ENTERED = 1
_DONE = 2


def is_reachable(graph: BuildGraph, start: int, target: int) -> bool:
    """
    Return True if `target` is a direct or transitive dependency of `start`.

    Depth-first walk over `needs` edges with an explicit stack. Reaching a
    node whose subtree is still being walked means the graph has a cycle,
    which raises CircularDependencyDetected instead of answering.

    A node reached again after its subtree finished (a diamond) is fine.
    """
    state: Dict[int, int] = {start: _ENTERED}
    # each frame: (handle, iterator over its needs)
    stack = [(start, iter(graph.node(start).needs))]

    while stack:
        handle, deps = stack[-1]
        dep = next(deps, None)

        if dep is None:
            state[handle] = _DONE
            stack.pop()
            continue

        seen = state.get(dep)
        if seen == _ENTERED:
            handles = [h for h, _ in stack]
            cycle = handles[handles.index(dep):] + [dep]
            raise CircularDependencyDetected([graph.node(h).name for h in cycle])

        if dep == target:
            return True

        if seen == _DONE:
            continue

        state[dep] = _ENTERED
        stack.append((dep, iter(graph.node(dep).needs)))

    return False


# ----------------------------------------------------------------------
# Scheduling
# ----------------------------------------------------------------------

def topo_levels(graph: BuildGraph) -> List[List[int]]:
    """
    Convert the graph into topological "levels" (stages).
    Nodes inside one stage do not depend on each other.
    """
    # edges dep -> dependent
    adj: Dict[int, List[int]] = {n.id: [] for n in graph}
    indeg: Dict[int, int] = {n.id: 0 for n in graph}
    for node in graph:
        for dep in node.needs:
            adj[dep].append(node.id)
            indeg[node.id] += 1

    def by_name(handles):
        return sorted(handles, key=lambda h: (graph.node(h).name, h))

    q = deque(by_name(h for h, d in indeg.items() if d == 0))
    levels: List[List[int]] = []
    processed = 0

    while q:
        level: List[int] = []
        ready: List[int] = []

        for _ in range(len(q)):
            handle = q.popleft()
            level.append(handle)
            processed += 1

            for child in adj[handle]:
                indeg[child] -= 1
                if indeg[child] == 0:
                    ready.append(child)

        q.extend(by_name(ready))
        levels.append(level)

    if processed != len(indeg):
        stuck = [h for h, d in indeg.items() if d > 0]
        # every stuck node leads into a cycle; name it
        is_reachable(graph, stuck[0], stuck[0])
        raise CircularDependencyDetected([graph.node(h).name for h in stuck])

    return levels


def _run_node(node: BuildNode) -> str:
    if node.action is None:
        return "ok"
    status = node.action()
    return status or "ok"


def run_graph(graph: BuildGraph, max_workers: int | None = None) -> Dict[str, str]:
    """
    Run every node once, stage by stage.

    - Stages run strictly in order; nodes within a stage run on a thread pool.
    - Returns {name: status}.
    - On first failure, stops and raises the exception.
    """
    console = get_console()
    results: Dict[str, str] = {}

    for level_idx, level in enumerate(topo_levels(graph)):
        names = [graph.node(h).name for h in level]
        console.print_stage(level_idx + 1, names)

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {pool.submit(_run_node, graph.node(h)): graph.node(h).name for h in level}

            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                    console.print_node_done(name, results[name])
                except BaseException:
                    console.print_node_failed(name)
                    raise

    return results
