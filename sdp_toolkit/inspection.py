"""
Structural analysis of semantic dependency graphs.

All queries are read-only, linear-time passes over the whole graph,
including the wall node. Traversals use explicit work stacks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from sdp_toolkit.graph import Graph


class Mark(Enum):
    """Visitation state of a node during depth-first search"""
    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class DegreeStats:
    max_indegree: int
    max_outdegree: int
    avg_indegree: float
    avg_outdegree: float
    n_structural_roots: int
    is_reentrant: bool


class InspectedGraph:
    """Read-only structural queries over a parsed graph."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def is_cyclic(self) -> bool:
        """True iff the graph contains a directed cycle (self-loops included)."""
        marks: Dict[int, Mark] = {node.id: Mark.UNVISITED for node in self.graph.nodes}

        for start in marks:
            if marks[start] is not Mark.UNVISITED:
                continue
            marks[start] = Mark.IN_PROGRESS
            # Each frame holds a node and the position of its next outgoing edge
            stack = [(start, 0)]
            while stack:
                current, next_edge = stack[-1]
                outgoing = self.graph.node(current).outgoing
                if next_edge == len(outgoing):
                    marks[current] = Mark.FINISHED
                    stack.pop()
                    continue
                stack[-1] = (current, next_edge + 1)
                target = self.graph.edge(outgoing[next_edge]).target
                if marks[target] is Mark.IN_PROGRESS:
                    return True
                if marks[target] is Mark.UNVISITED:
                    marks[target] = Mark.IN_PROGRESS
                    stack.append((target, 0))
        return False

    def _neighbours(self, index: int) -> List[int]:
        node = self.graph.node(index)
        neighbours = [self.graph.edge(e).target for e in node.outgoing]
        neighbours.extend(self.graph.edge(e).source for e in node.incoming)
        return neighbours

    def n_components(self) -> int:
        """Number of weakly connected components."""
        visited = [False] * self.graph.n_nodes
        n_components = 0
        for start in range(self.graph.n_nodes):
            if visited[start]:
                continue
            n_components += 1
            visited[start] = True
            stack = [start]
            while stack:
                current = stack.pop()
                for neighbour in self._neighbours(current):
                    if not visited[neighbour]:
                        visited[neighbour] = True
                        stack.append(neighbour)
        return n_components

    def n_singletons(self) -> int:
        """Number of nodes without incoming or outgoing edges."""
        return sum(
            1 for node in self.graph.nodes
            if not node.has_incoming_edges() and not node.has_outgoing_edges()
        )

    def degree_stats(self) -> DegreeStats:
        nodes = self.graph.nodes
        indegrees = [node.n_incoming_edges for node in nodes]
        outdegrees = [node.n_outgoing_edges for node in nodes]
        n_nodes = len(nodes)
        return DegreeStats(
            max_indegree=max(indegrees, default=0),
            max_outdegree=max(outdegrees, default=0),
            avg_indegree=sum(indegrees) / n_nodes if n_nodes else 0.0,
            avg_outdegree=sum(outdegrees) / n_nodes if n_nodes else 0.0,
            n_structural_roots=sum(1 for d in indegrees if d == 0),
            is_reentrant=any(d >= 2 for d in indegrees),
        )
