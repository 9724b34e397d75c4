"""
Pytest fixtures for sdp_toolkit testing.

Provides shared fixtures for:
- Hand-written records in the SDP 2015 format
- Corpus files written to a temporary directory
- Small graphs built directly through the graph model
"""

from pathlib import Path
from typing import List

import pytest

from sdp_toolkit.graph import Graph


def row(*fields: str) -> str:
    """Join columns with the SDP column separator."""
    return "\t".join(fields)


# ============================================================================
# Records
# ============================================================================

# Predicates in line order: 1 (Pierre), 4 (61), 5 (years), 6 (old)
RECORD_A = [
    "#20001001",
    row("1", "Pierre", "Pierre", "NNP", "-", "+", "named:x-c", "_", "_", "_", "_"),
    row("2", "Vinken", "_generic_proper_ne_", "NNP", "-", "-", "_", "compound", "_", "_", "ARG1"),
    row("3", ",", "_", ",", "-", "-", "_", "_", "_", "_", "_"),
    row("4", "61", "_generic_card_ne_", "CD", "-", "+", "card:i-i-c", "_", "_", "_", "_"),
    row("5", "years", "year", "NNS", "-", "+", "n:x", "_", "ARG1", "_", "_"),
    row("6", "old", "old", "JJ", "+", "+", "a:e-p", "_", "_", "measure", "_"),
    row("7", ".", "_", ".", "-", "-", "_", "_", "_", "_", "_"),
]

# Predicates 1 and 2 point at each other
RECORD_B = [
    "#20001002",
    row("1", "Mr.", "Mr.", "NNP", "-", "+", "n:x", "_", "ARG1"),
    row("2", "Vinken", "Vinken", "NNP", "+", "+", "named:x-c", "compound", "_"),
    row("3", "is", "be", "VBZ", "-", "-", "_", "_", "_"),
]

# Token 1 is a predicate whose single argument is token 2
RECORD_MINIMAL = [
    "#12345678",
    row("1", "Pierre", "Pierre", "NNP", "-", "+", "_", "_"),
    row("2", "Vinken", "Vinken", "NNP", "-", "-", "_", "ARG1"),
]


def corpus_text(*records: List[str], header: bool = True) -> str:
    paragraphs = ["\n".join(record) for record in records]
    text = "\n\n".join(paragraphs) + "\n"
    return ("#SDP 2015\n" + text) if header else text


@pytest.fixture
def record_a() -> List[str]:
    return list(RECORD_A)


@pytest.fixture
def record_b() -> List[str]:
    return list(RECORD_B)


@pytest.fixture
def minimal_record() -> List[str]:
    return list(RECORD_MINIMAL)


@pytest.fixture
def corpus_file(tmp_path) -> Path:
    """A two-record corpus file with the format header."""
    path = tmp_path / "corpus.sdp"
    path.write_text(corpus_text(RECORD_A, RECORD_B), encoding="utf-8")
    return path


@pytest.fixture
def corpus_file_factory(tmp_path):
    def make_corpus_file(*records: List[str], name: str = "corpus.sdp", header: bool = True) -> Path:
        path = tmp_path / name
        path.write_text(corpus_text(*records, header=header), encoding="utf-8")
        return path

    return make_corpus_file


# ============================================================================
# Graphs
# ============================================================================

@pytest.fixture
def graph_factory():
    """Build a graph with `n_nodes` plain nodes and the given (source, target) edges."""
    def make_graph(n_nodes: int, edges=(), graph_id: str = "#00000000") -> Graph:
        graph = Graph(graph_id)
        for i in range(n_nodes):
            graph.add_node(f"w{i}", f"w{i}", "NN", False, False)
        for source, target in edges:
            graph.add_edge(source, target, "ARG1")
        return graph

    return make_graph
