"""Read semantic dependency graphs in the SDP 2015 format and report their structure."""

from sdp_toolkit.graph import Edge, Graph, IndexOutOfRange, InvalidIndex, Node
from sdp_toolkit.inspection import InspectedGraph
from sdp_toolkit.reader import (
    ConsistencyError,
    GraphReader,
    MalformedRecord,
    RecordError,
    open_graph_reader,
    parse_record,
)

__version__ = "0.1.0"
