"""
Tests for structural analysis.

Tests verify:
- Cycle detection on DAGs, self-loops, longer cycles and disconnected graphs
- Weakly connected component counts
- Singleton counts
- Degree statistics
- Agreement with networkx on the same graphs
"""

import networkx as nx
import pytest

from sdp_toolkit.export import to_networkx
from sdp_toolkit.inspection import InspectedGraph
from sdp_toolkit.reader import parse_record

GRAPHS = {
    "empty": (1, []),
    "no_edges": (5, []),
    "chain": (4, [(0, 1), (1, 2), (2, 3)]),
    "diamond": (4, [(0, 1), (0, 2), (1, 3), (2, 3)]),
    "self_loop": (3, [(1, 2), (2, 2)]),
    "two_cycle": (3, [(1, 2), (2, 1)]),
    "long_cycle": (6, [(0, 1), (1, 2), (2, 3), (3, 4), (4, 1)]),
    "cycle_in_second_component": (6, [(0, 1), (3, 4), (4, 5), (5, 3)]),
    "reversed_chain": (4, [(3, 2), (2, 1), (1, 0)]),
    "parallel_edges": (3, [(1, 2), (1, 2)]),
}


class TestIsCyclic:
    """Tests for directed cycle detection."""

    @pytest.mark.parametrize("name", ["empty", "no_edges", "chain", "diamond", "reversed_chain", "parallel_edges"])
    def test_acyclic(self, graph_factory, name):
        n_nodes, edges = GRAPHS[name]
        assert not InspectedGraph(graph_factory(n_nodes, edges)).is_cyclic()

    @pytest.mark.parametrize("name", ["self_loop", "two_cycle", "long_cycle", "cycle_in_second_component"])
    def test_cyclic(self, graph_factory, name):
        n_nodes, edges = GRAPHS[name]
        assert InspectedGraph(graph_factory(n_nodes, edges)).is_cyclic()

    def test_cycle_unreachable_from_wall(self, graph_factory):
        # The cycle 2 -> 3 -> 4 is not reachable from node 0
        graph = graph_factory(5, [(0, 1), (2, 3), (3, 4), (4, 2)])
        assert InspectedGraph(graph).is_cyclic()

    def test_deep_chain_does_not_recurse(self, graph_factory):
        n_nodes = 20000
        graph = graph_factory(n_nodes, [(i, i + 1) for i in range(n_nodes - 1)])
        assert not InspectedGraph(graph).is_cyclic()
        assert InspectedGraph(graph).n_components() == 1


class TestComponents:
    """Tests for weak connectivity."""

    def test_no_edges(self, graph_factory):
        assert InspectedGraph(graph_factory(5)).n_components() == 5

    def test_star_from_wall(self, graph_factory):
        graph = graph_factory(6, [(0, i) for i in range(1, 6)])
        assert InspectedGraph(graph).n_components() == 1

    def test_direction_is_ignored(self, graph_factory):
        # 1 and 3 only share an incoming neighbour
        graph = graph_factory(4, [(1, 2), (3, 2)])
        assert InspectedGraph(graph).n_components() == 2

    def test_isolated_wall(self, record_a):
        assert InspectedGraph(parse_record(record_a)).n_components() == 4


class TestSingletons:
    """Tests for singleton counting."""

    def test_no_edges(self, graph_factory):
        assert InspectedGraph(graph_factory(4)).n_singletons() == 4

    def test_every_node_incident(self, graph_factory):
        graph = graph_factory(4, [(0, 1), (2, 3)])
        assert InspectedGraph(graph).n_singletons() == 0

    def test_self_loop_is_not_a_singleton(self, graph_factory):
        graph = graph_factory(2, [(1, 1)])
        assert InspectedGraph(graph).n_singletons() == 1


class TestDegreeStats:
    """Tests for degree statistics."""

    def test_record(self, record_a):
        stats = InspectedGraph(parse_record(record_a)).degree_stats()

        assert stats.max_indegree == 2
        assert stats.max_outdegree == 1
        assert stats.avg_indegree == pytest.approx(4 / 8)
        assert stats.avg_outdegree == pytest.approx(4 / 8)
        assert stats.n_structural_roots == 5
        assert stats.is_reentrant

    def test_not_reentrant(self, graph_factory):
        stats = InspectedGraph(graph_factory(3, [(0, 1), (1, 2)])).degree_stats()

        assert not stats.is_reentrant
        assert stats.n_structural_roots == 1


class TestRecordScenario:
    """End-to-end checks on parsed records."""

    def test_minimal_record(self, minimal_record):
        inspected = InspectedGraph(parse_record(minimal_record))

        assert not inspected.is_cyclic()
        assert inspected.n_components() == 2
        assert inspected.n_singletons() == 1

    def test_mutual_predicates(self, record_b):
        inspected = InspectedGraph(parse_record(record_b))

        assert inspected.is_cyclic()
        assert inspected.n_components() == 3
        assert inspected.n_singletons() == 2

    def test_queries_do_not_mutate(self, record_a):
        graph = parse_record(record_a)
        before = parse_record(record_a)
        inspected = InspectedGraph(graph)
        inspected.is_cyclic()
        inspected.n_components()
        inspected.n_singletons()
        inspected.degree_stats()

        assert graph == before


class TestAgreementWithNetworkx:
    """The analyzer agrees with networkx on the same graphs."""

    @pytest.mark.parametrize("name", sorted(GRAPHS))
    def test_graphs(self, graph_factory, name):
        n_nodes, edges = GRAPHS[name]
        graph = graph_factory(n_nodes, edges)
        G = to_networkx(graph)
        inspected = InspectedGraph(graph)

        assert inspected.is_cyclic() == (not nx.is_directed_acyclic_graph(G))
        assert inspected.n_components() == nx.number_weakly_connected_components(G)
        assert inspected.n_singletons() == len(list(nx.isolates(G)))

    @pytest.mark.parametrize("record", ["record_a", "record_b", "minimal_record"])
    def test_records(self, request, record):
        graph = parse_record(request.getfixturevalue(record))
        G = to_networkx(graph)
        inspected = InspectedGraph(graph)

        assert inspected.is_cyclic() == (not nx.is_directed_acyclic_graph(G))
        assert inspected.n_components() == nx.number_weakly_connected_components(G)
