from __future__ import annotations

import itertools
import random

import pytest

from sparsedep.dag import BuildGraph, is_reachable, run_graph, topo_levels
from sparsedep.errors import CircularDependencyDetected


def _graph(n: int, edges) -> BuildGraph:
    g = BuildGraph()
    for i in range(n):
        g.add_node(f"n{i}")
    for a, b in edges:
        g.depend_on(a, b)
    return g


def _paths_oracle(g: BuildGraph, start: int, target: int) -> bool:
    """Enumerate every simple path from start; acyclic graphs only."""
    def walk(h):
        for dep in g.node(h).needs:
            if dep == target or walk(dep):
                return True
        return False
    return walk(start)


def test_direct_and_transitive() -> None:
    g = _graph(4, [(0, 1), (1, 2)])

    assert is_reachable(g, 0, 1)
    assert is_reachable(g, 0, 2)
    assert not is_reachable(g, 0, 3)
    assert not is_reachable(g, 2, 0)


def test_node_is_not_its_own_dependency() -> None:
    g = _graph(2, [(0, 1)])

    assert not is_reachable(g, 0, 0)


def test_diamond_is_not_a_cycle() -> None:
    # 0 -> 1 -> 3, 0 -> 2 -> 3, 3 -> 4
    g = _graph(6, [(0, 1), (0, 2), (1, 3), (2, 3), (3, 4)])

    assert is_reachable(g, 0, 4)
    assert not is_reachable(g, 0, 5)


def test_matches_oracle_on_random_dags() -> None:
    rng = random.Random(1234)
    for _ in range(50):
        n = rng.randint(1, 7)
        # edges only from higher to lower index keeps it acyclic
        edges = [(a, b) for a, b in itertools.permutations(range(n), 2) if a > b and rng.random() < 0.35]
        g = _graph(n, edges)
        for start, target in itertools.product(range(n), repeat=2):
            assert is_reachable(g, start, target) == _paths_oracle(g, start, target)


@pytest.mark.parametrize(
    "edges",
    [
        [(0, 1), (1, 0)],
        [(0, 1), (1, 2), (2, 1)],
        [(0, 0)],
        [(0, 3), (0, 1), (1, 2), (2, 0)],
    ],
)
def test_cycle_raises_instead_of_answering(edges) -> None:
    g = _graph(5, edges)

    with pytest.raises(CircularDependencyDetected):
        is_reachable(g, 0, 4)


def test_cycle_through_target_still_raises() -> None:
    g = _graph(2, [(0, 1), (1, 0)])

    with pytest.raises(CircularDependencyDetected) as error:
        is_reachable(g, 0, 0)

    assert error.value.cycle == ["n0", "n1", "n0"]


def test_duplicate_node_names_are_rejected() -> None:
    g = BuildGraph()
    g.add_node("fetch")

    with pytest.raises(ValueError, match="Duplicate build node name"):
        g.add_node("fetch")
    assert len(g) == 1


def test_depend_on_ignores_duplicates_and_rejects_unknown() -> None:
    g = _graph(2, [(0, 1), (0, 1)])

    assert g.node(0).needs == [1]
    with pytest.raises(KeyError):
        g.depend_on(0, 7)


def test_topo_levels_orders_dependencies_first() -> None:
    g = BuildGraph()
    compile_ = g.add_node("compile")
    fetch = g.add_node("fetch")
    headers = g.add_node("headers")
    g.depend_on(compile_, fetch)
    g.depend_on(headers, fetch)

    assert topo_levels(g) == [[fetch], [compile_, headers]]


def test_topo_levels_rejects_cycles() -> None:
    g = _graph(3, [(0, 1), (1, 0), (2, 0)])

    with pytest.raises(CircularDependencyDetected):
        topo_levels(g)


def test_run_graph_runs_each_node_once_in_order() -> None:
    order = []
    g = BuildGraph()
    a = g.add_node("a", lambda: order.append("a"))
    b = g.add_node("b", lambda: order.append("b") or "skipped(exists)")
    c = g.add_node("c")
    g.depend_on(b, a)
    g.depend_on(c, b)

    results = run_graph(g)

    assert order == ["a", "b"]
    assert results == {"a": "ok", "b": "skipped(exists)", "c": "ok"}


def test_run_graph_stops_on_failure() -> None:
    ran = []

    def boom():
        raise RuntimeError("boom")

    g = BuildGraph()
    a = g.add_node("a", boom)
    b = g.add_node("b", lambda: ran.append("b"))
    g.depend_on(b, a)

    with pytest.raises(RuntimeError, match="boom"):
        run_graph(g)
    assert ran == []
