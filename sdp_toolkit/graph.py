"""
Semantic dependency graph model.

A Graph owns an append-only sequence of nodes and edges. Indices are dense,
stable and zero-based; nodes refer to their incident edges by edge index only.

Usage:
    from sdp_toolkit.graph import Graph

    graph = Graph("#20001001")
    wall = graph.add_node("#wall", "#wall", "#wall", False, False, "#wall")
    token = graph.add_node("Pierre", "Pierre", "NNP", True, False)
    graph.add_edge(token.id, wall.id, "ARG1")
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


class GraphIndexError(IndexError):
    """Base class for node/edge index violations."""
    pass


class InvalidIndex(GraphIndexError):
    """Raised when an edge endpoint is not a node of the graph."""
    pass


class IndexOutOfRange(GraphIndexError):
    """Raised when a node or edge lookup is outside the valid range."""
    pass


@dataclass(frozen=True)
class Edge:
    id: int
    source: int
    target: int
    label: str


@dataclass
class Node:
    id: int
    form: str
    lemma: str
    pos: str
    is_top: bool
    is_pred: bool
    sense: Optional[str] = None
    # Edge indices into the owning graph, in insertion order
    outgoing: List[int] = field(default_factory=list, repr=False)
    incoming: List[int] = field(default_factory=list, repr=False)

    @property
    def n_outgoing_edges(self) -> int:
        return len(self.outgoing)

    @property
    def n_incoming_edges(self) -> int:
        return len(self.incoming)

    def has_outgoing_edges(self) -> bool:
        return bool(self.outgoing)

    def has_incoming_edges(self) -> bool:
        return bool(self.incoming)


class Graph:
    """A semantic dependency graph identified by its record id."""

    def __init__(self, id: str):
        self.id = id
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []

    def __repr__(self) -> str:
        return f"Graph(id={self.id!r}, n_nodes={self.n_nodes}, n_edges={self.n_edges})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return (
            self.id == other.id
            and self._nodes == other._nodes
            and self._edges == other._edges
        )

    __hash__ = None

    def add_node(self, form: str, lemma: str, pos: str, is_top: bool, is_pred: bool,
                 sense: Optional[str] = None) -> Node:
        node = Node(len(self._nodes), form, lemma, pos, is_top, is_pred, sense)
        self._nodes.append(node)
        return node

    def add_edge(self, source: int, target: int, label: str) -> Edge:
        """
        Append an edge and register it on both endpoints.

        Raises:
            InvalidIndex: If source or target is not a node index of this graph
        """
        for role, index in (("source", source), ("target", target)):
            if not 0 <= index < len(self._nodes):
                raise InvalidIndex(
                    f"Edge {role} {index} is not a node of graph {self.id} "
                    f"(valid range: 0..{len(self._nodes) - 1})"
                )
        edge = Edge(len(self._edges), source, target, label)
        self._edges.append(edge)
        self._nodes[source].outgoing.append(edge.id)
        self._nodes[target].incoming.append(edge.id)
        return edge

    @property
    def n_nodes(self) -> int:
        return len(self._nodes)

    @property
    def n_edges(self) -> int:
        return len(self._edges)

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def node(self, index: int) -> Node:
        if not 0 <= index < len(self._nodes):
            raise IndexOutOfRange(f"Node {index} out of range for graph {self.id} ({len(self._nodes)} nodes)")
        return self._nodes[index]

    def edge(self, index: int) -> Edge:
        if not 0 <= index < len(self._edges):
            raise IndexOutOfRange(f"Edge {index} out of range for graph {self.id} ({len(self._edges)} edges)")
        return self._edges[index]

    def outgoing_edges(self, index: int) -> List[Edge]:
        return [self._edges[e] for e in self.node(index).outgoing]

    def incoming_edges(self, index: int) -> List[Edge]:
        return [self._edges[e] for e in self.node(index).incoming]

    def tops(self) -> List[Node]:
        return [node for node in self._nodes if node.is_top]

    def preds(self) -> List[Node]:
        return [node for node in self._nodes if node.is_pred]
