"""
Per-graph and corpus-level statistics over semantic dependency graphs.

Rows are returned as graphs are folded in and are not kept, so memory use
does not depend on the size of the corpus.

Usage:
    stats = CorpusStatistics()
    print(format_header())
    for graph in reader:
        print(format_row(stats.update(graph)))
    print(stats.format_summary())
"""

from dataclasses import dataclass
from typing import List, Tuple

import tabulate

from sdp_toolkit.graph import Graph
from sdp_toolkit.inspection import InspectedGraph

ROW_HEADERS = ["Graph", "Tops", "Edges from tops", "Cyclic", "Semi-connected", "Singletons"]


def _flag(value: bool) -> str:
    return "+" if value else "-"


@dataclass(frozen=True)
class GraphRow:
    graph_id: str
    n_top_nodes: int
    n_edges_from_tops: int
    is_cyclic: bool
    is_semi_connected: bool
    n_singletons: int

    def as_tuple(self) -> Tuple:
        return (
            self.graph_id,
            self.n_top_nodes,
            self.n_edges_from_tops,
            _flag(self.is_cyclic),
            _flag(self.is_semi_connected),
            self.n_singletons,
        )


@dataclass
class CorpusStatistics:
    """Accumulates statistics over a collection of graphs."""

    n_graphs: int = 0
    n_nodes: int = 0
    n_edges: int = 0
    n_skipped: int = 0
    n_top_nodes: int = 0
    n_structural_roots: int = 0
    n_semi_connected: int = 0
    n_reentrant: int = 0
    n_cyclic: int = 0
    n_singletons: int = 0
    max_indegree: int = 0
    max_outdegree: int = 0

    def update(self, graph: Graph) -> GraphRow:
        """Fold one graph into the statistics and return its row."""
        inspected = InspectedGraph(graph)
        degrees = inspected.degree_stats()
        tops = graph.tops()

        row = GraphRow(
            graph_id=graph.id,
            n_top_nodes=len(tops),
            n_edges_from_tops=sum(node.n_outgoing_edges for node in tops),
            is_cyclic=inspected.is_cyclic(),
            is_semi_connected=inspected.n_components() <= 1,
            n_singletons=inspected.n_singletons(),
        )

        self.n_graphs += 1
        self.n_nodes += graph.n_nodes
        self.n_edges += graph.n_edges
        self.n_top_nodes += row.n_top_nodes
        self.n_structural_roots += degrees.n_structural_roots
        self.n_semi_connected += int(row.is_semi_connected)
        self.n_reentrant += int(degrees.is_reentrant)
        self.n_cyclic += int(row.is_cyclic)
        self.n_singletons += row.n_singletons
        self.max_indegree = max(self.max_indegree, degrees.max_indegree)
        self.max_outdegree = max(self.max_outdegree, degrees.max_outdegree)
        return row

    def skip(self) -> None:
        self.n_skipped += 1

    def _per_graph(self, total: int) -> float:
        return total / self.n_graphs if self.n_graphs else 0.0

    @property
    def avg_top_nodes(self) -> float:
        return self._per_graph(self.n_top_nodes)

    @property
    def avg_structural_roots(self) -> float:
        return self._per_graph(self.n_structural_roots)

    @property
    def avg_singletons(self) -> float:
        return self._per_graph(self.n_singletons)

    @property
    def pc_semi_connected(self) -> float:
        return self._per_graph(self.n_semi_connected)

    @property
    def pc_reentrant(self) -> float:
        return self._per_graph(self.n_reentrant)

    @property
    def pc_cyclic(self) -> float:
        return self._per_graph(self.n_cyclic)

    @property
    def avg_degree(self) -> float:
        # Every edge adds one to an indegree and one to an outdegree
        return self.n_edges / self.n_nodes if self.n_nodes else 0.0

    def summary(self) -> List[Tuple[str, object]]:
        return [
            ("number of graphs", self.n_graphs),
            ("number of skipped records", self.n_skipped),
            ("number of nodes", self.n_nodes),
            ("number of edges", self.n_edges),
            ("average number of top nodes per graph", self.avg_top_nodes),
            ("average number of structural roots per graph", self.avg_structural_roots),
            ("average number of singletons per graph", self.avg_singletons),
            ("percentage of cyclic graphs", self.pc_cyclic),
            ("percentage of semi-connected graphs", self.pc_semi_connected),
            ("percentage of reentrant graphs", self.pc_reentrant),
            ("maximal indegree", self.max_indegree),
            ("maximal outdegree", self.max_outdegree),
            ("average indegree / outdegree", self.avg_degree),
        ]

    def format_summary(self, tablefmt: str = "simple") -> str:
        rows = [
            (label, f"{value:.6f}" if isinstance(value, float) else str(value))
            for label, value in self.summary()
        ]
        return tabulate.tabulate(rows, headers=["Statistic", "Value"], tablefmt=tablefmt,
                                 disable_numparse=True, colalign=("left", "right"))


def format_header() -> str:
    return "\t".join(ROW_HEADERS)


def format_row(row: GraphRow) -> str:
    """Render one row as a tab-separated line, in the column order of `ROW_HEADERS`."""
    return "\t".join(str(value) for value in row.as_tuple())
