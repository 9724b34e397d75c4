"""
NetworkX conversion and node-link JSON export of parsed graphs.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import networkx as nx

from sdp_toolkit.graph import Graph

logger = logging.getLogger(__name__)


def to_networkx(graph: Graph) -> nx.MultiDiGraph:
    """Convert a graph to a MultiDiGraph keyed by node index, one edge per SDP edge."""
    G = nx.MultiDiGraph(id=graph.id)
    for node in graph.nodes:
        G.add_node(
            node.id,
            form=node.form,
            lemma=node.lemma,
            pos=node.pos,
            is_top=node.is_top,
            is_pred=node.is_pred,
            sense=node.sense,
        )
    for edge in graph.edges:
        G.add_edge(edge.source, edge.target, key=edge.id, label=edge.label)
    return G


def graph_document(graph: Graph) -> Dict[str, Any]:
    G = to_networkx(graph)
    return {
        "metadata": {
            "id": graph.id,
            "generated": datetime.now().isoformat(),
            "num_nodes": G.number_of_nodes(),
            "num_edges": G.number_of_edges(),
        },
        "graph": nx.node_link_data(G, edges="edges"),
    }


def export_graph(graph: Graph, export_dir: Union[str, Path],
                 written: Optional[Set[Path]] = None) -> Path:
    """
    Write one graph as `<export_dir>/<id without '#'>.json` and return the path.

    Args:
        graph: Graph to export
        export_dir: Output directory, created if missing
        written: Paths already written in this run. A graph whose file name
            is taken gets a numbered suffix (`<id>-2.json`, ...) and a warning
            is logged. The new path is added to the set.
    """
    export_dir = Path(export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    stem = graph.id.lstrip('#')
    output_path = export_dir / f"{stem}.json"
    if written is not None:
        n = 1
        while output_path in written:
            n += 1
            output_path = export_dir / f"{stem}-{n}.json"
        if n > 1:
            logger.warning("Duplicate graph id %s; writing %s", graph.id, output_path)
        written.add(output_path)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(graph_document(graph), f, indent=2)
    logger.debug("Wrote %s (%d nodes, %d edges)", output_path, graph.n_nodes, graph.n_edges)
    return output_path
