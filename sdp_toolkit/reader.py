"""
Reader for semantic dependency graphs in the SDP 2015 format.

A file starts with the format header line `#SDP 2015`, followed by records
separated by blank lines. The first line of a record is its identifier
(`#` followed by eight digits); every further line describes one token:

    ID  FORM  LEMMA  POS  TOP  PRED  SENSE  ARG_1 ... ARG_P

Columns are tab-separated. ARG_k holds the label of the edge from the k-th
predicate of the record (in line order) to the token, or `_` for no edge.

Usage:
    from sdp_toolkit.reader import open_graph_reader

    with open_graph_reader("train.sdp") as reader:
        for graph in reader:
            print(graph.id, graph.n_nodes, graph.n_edges)
"""

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO, Union

from sdp_toolkit.graph import Graph

logger = logging.getLogger(__name__)

FORMAT_HEADER = "#SDP 2015"
RECORD_ID_PATTERN = re.compile(r"^#[0-9]{8}$")
TOKEN_ID_PATTERN = re.compile(r"^[0-9]+$")
BYTE_ORDER_MARK = "\ufeff"
COLUMN_SEPARATOR = "\t"
UNDEFINED = "_"
PLUS = "+"
MINUS = "-"

# ID, FORM, LEMMA, POS, TOP, PRED, SENSE
N_FIXED_COLUMNS = 7

WALL_FORM = "#wall"
WALL_LEMMA = "#wall"
WALL_POS = "#wall"
WALL_SENSE = "#wall"

STRICT = "strict"
LENIENT = "lenient"
COLUMN_POLICIES = (STRICT, LENIENT)


class RecordError(Exception):
    """Raised when a record cannot be decoded into a graph."""

    def __init__(self, reason: str, record_id: Optional[str] = None,
                 line: Optional[int] = None, position: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.record_id = record_id
        self.line = line
        # 1-based index of the record in its stream, set by GraphReader
        self.position = position

    def __str__(self) -> str:
        where = []
        if self.position is not None:
            where.append(f"record {self.position}")
        if self.record_id:
            where.append(self.record_id)
        if self.line is not None:
            where.append(f"line {self.line}")
        if not where:
            return self.reason
        return f"{', '.join(where)}: {self.reason}"


class MalformedRecord(RecordError):
    """The record violates the structure of the format."""
    pass


class ConsistencyError(RecordError):
    """A structural self-check failed while building the graph."""
    pass


def _parse_flag(value: str, column: str, record_id: str, line: int) -> bool:
    if value == PLUS:
        return True
    if value == MINUS:
        return False
    raise MalformedRecord(
        f"{column} column must be '{PLUS}' or '{MINUS}', got {value!r}",
        record_id=record_id, line=line,
    )


def parse_record(lines: Sequence[str], column_policy: str = STRICT) -> Graph:
    """
    Decode one record into a graph.

    Node 0 is the wall node; the token on the i-th token line becomes node i.

    Args:
        lines: Record lines, identifier first; trailing newlines are ignored
        column_policy: `strict` rejects token lines whose column count differs
            from 7 + number of predicates; `lenient` logs them and reads the
            argument cells that are present

    Returns:
        The completed graph

    Raises:
        MalformedRecord: If the record does not follow the format
        ConsistencyError: If the decoded graph fails a structural check
    """
    if column_policy not in COLUMN_POLICIES:
        raise ValueError(f"Unknown column policy {column_policy!r}; expected one of {COLUMN_POLICIES}")

    lines = [line.rstrip("\r\n") for line in lines]
    if len(lines) < 2:
        record_id = lines[0] if lines else None
        raise MalformedRecord("a record needs an identifier line and at least one token line",
                              record_id=record_id)

    record_id = lines[0]
    if not RECORD_ID_PATTERN.match(record_id):
        raise MalformedRecord(f"invalid record identifier {record_id!r}", line=1)

    graph = Graph(record_id)
    graph.add_node(WALL_FORM, WALL_LEMMA, WALL_POS, False, False, WALL_SENSE)

    # First pass: token nodes, and the predicates in line order
    predicates: List[int] = []
    for line_no, line in enumerate(lines[1:], start=2):
        fields = line.split(COLUMN_SEPARATOR)
        if len(fields) < N_FIXED_COLUMNS:
            raise MalformedRecord(
                f"expected at least {N_FIXED_COLUMNS} columns, got {len(fields)}",
                record_id=record_id, line=line_no,
            )
        is_top = _parse_flag(fields[4], "TOP", record_id, line_no)
        is_pred = _parse_flag(fields[5], "PRED", record_id, line_no)
        if not TOKEN_ID_PATTERN.match(fields[0]):
            raise MalformedRecord(f"ID column is not a decimal integer: {fields[0]!r}",
                                  record_id=record_id, line=line_no)
        token_id = int(fields[0])

        node = graph.add_node(fields[1], fields[2], fields[3], is_top, is_pred, fields[6])
        if node.id != token_id:
            raise ConsistencyError(
                f"token ID {token_id} does not match node index {node.id}",
                record_id=record_id, line=line_no,
            )
        if node.is_pred:
            predicates.append(node.id)

    # Second pass: one argument column per predicate
    expected = N_FIXED_COLUMNS + len(predicates)
    for token, line in enumerate(lines[1:], start=1):
        line_no = token + 1
        fields = line.split(COLUMN_SEPARATOR)
        if len(fields) != expected:
            if column_policy == STRICT:
                raise ConsistencyError(
                    f"expected {expected} columns ({len(predicates)} predicates), got {len(fields)}",
                    record_id=record_id, line=line_no,
                )
            logger.warning("%s, line %d: expected %d columns, got %d; reading available argument columns",
                           record_id, line_no, expected, len(fields))
        for k, label in enumerate(fields[N_FIXED_COLUMNS:expected]):
            if label != UNDEFINED:
                graph.add_edge(predicates[k], token, label)

    for node in graph.nodes:
        if node.is_pred and not node.has_outgoing_edges():
            raise ConsistencyError(
                f"predicate {node.id} ({node.form!r}) has no outgoing edges",
                record_id=record_id, line=node.id + 1,
            )

    return graph


def iter_paragraphs(stream: TextIO) -> Iterator[List[str]]:
    """
    Split a text stream into blank-line-delimited paragraphs.

    A byte order mark and a leading `#SDP 2015` header line are skipped.
    Lines are yielded without their line terminators.
    """
    paragraph: List[str] = []
    first = True
    for raw in stream:
        line = raw.rstrip("\r\n")
        if first:
            first = False
            line = line.lstrip(BYTE_ORDER_MARK)
            if line == FORMAT_HEADER:
                continue
        if line.strip():
            paragraph.append(line)
        elif paragraph:
            yield paragraph
            paragraph = []
    if paragraph:
        yield paragraph


class GraphReader:
    """Read graphs one record at a time from a text stream."""

    def __init__(self, stream: TextIO, column_policy: str = STRICT):
        if column_policy not in COLUMN_POLICIES:
            raise ValueError(f"Unknown column policy {column_policy!r}; expected one of {COLUMN_POLICIES}")
        self.column_policy = column_policy
        self.position = 0
        self._paragraphs = iter_paragraphs(stream)

    def read_graph(self) -> Optional[Graph]:
        """
        Read the next graph.

        Returns:
            The graph read, or None at the end of the stream

        Raises:
            RecordError: If the record is invalid; `position` is set to the
                record's 1-based index in the stream. Reading may continue
                with the next record.
        """
        lines = next(self._paragraphs, None)
        if lines is None:
            return None
        self.position += 1
        try:
            return parse_record(lines, self.column_policy)
        except RecordError as e:
            e.position = self.position
            raise

    def __iter__(self) -> Iterator[Graph]:
        while True:
            graph = self.read_graph()
            if graph is None:
                return
            yield graph


@contextmanager
def open_graph_reader(path: Union[str, Path], column_policy: str = STRICT) -> Iterator[GraphReader]:
    """Open a file in the SDP 2015 format for reading."""
    with open(path, "r", encoding="utf-8-sig") as f:
        yield GraphReader(f, column_policy=column_policy)
