#!/usr/bin/env python3
"""
Print statistics about a collection of semantic dependency graphs.

Usage:
    sdp-analyze train.sdp
    sdp-analyze --column-policy lenient --skip-invalid dev.sdp test.sdp
    sdp-analyze --config sdp.yml --export-dir out/graphs train.sdp
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Set

from sdp_toolkit.config import ConfigError, Settings, load_settings
from sdp_toolkit.export import export_graph
from sdp_toolkit.reader import COLUMN_POLICIES, RecordError, open_graph_reader
from sdp_toolkit.statistics import CorpusStatistics, format_header, format_row

logger = logging.getLogger("sdp-analyze")

EXIT_OK = 0
EXIT_RECORD_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdp-analyze",
        description="Print structural statistics about graphs in the SDP 2015 format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Per-graph rows and corpus summary
  sdp-analyze train.sdp

  # Keep going past invalid records and accept short argument rows
  sdp-analyze --skip-invalid --column-policy lenient train.sdp

  # Also write every graph as node-link JSON
  sdp-analyze --export-dir out/graphs train.sdp

Environment:
  SDP_COLUMN_POLICY, SDP_TABLEFMT, SDP_LOG_LEVEL override the configuration file.
        '''
    )
    parser.add_argument('files', nargs='+', help='Files in the SDP 2015 format')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--column-policy', choices=COLUMN_POLICIES,
                        help='How to treat rows with the wrong number of argument columns (default: strict)')
    parser.add_argument('--skip-invalid', action='store_true', default=None,
                        help='Log and skip invalid records instead of stopping')
    parser.add_argument('--export-dir', help='Write each graph as node-link JSON into this directory')
    parser.add_argument('--tablefmt', help='tabulate table format of the corpus summary (default: simple)')
    parser.add_argument('--quiet', action='store_true',
                        help='Print only the corpus summary, not the per-graph rows')
    parser.add_argument('--log-level', type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: WARNING)')
    return parser


def analyze_file(path: Path, stats: CorpusStatistics, settings: Settings,
                 print_rows: bool = True, exported: Optional[Set[Path]] = None) -> bool:
    """
    Fold every graph of one file into the statistics.

    Each graph's row is printed as soon as it is read unless `print_rows`
    is False.

    Returns:
        False if an invalid record or undecodable input stopped reading,
        True otherwise
    """
    with open_graph_reader(path, column_policy=settings.column_policy) as reader:
        while True:
            try:
                graph = reader.read_graph()
            except RecordError as e:
                if not settings.skip_invalid:
                    logger.error("%s: %s", path, e)
                    return False
                logger.warning("%s: skipping %s", path, e)
                stats.skip()
                continue
            except UnicodeDecodeError as e:
                # Framing is lost, so there is no next record to skip to
                logger.error("%s: after record %d: %s", path, reader.position, e)
                return False
            if graph is None:
                return True
            row = stats.update(graph)
            if print_rows:
                print(format_row(row))
            if settings.export_dir:
                export_graph(graph, settings.export_dir, written=exported)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    settings = settings.merged(
        column_policy=args.column_policy,
        skip_invalid=args.skip_invalid,
        export_dir=args.export_dir,
        tablefmt=args.tablefmt,
        log_level=args.log_level,
    )

    logging.basicConfig(level=getattr(logging, settings.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    paths = [Path(file_name) for file_name in args.files]
    for path in paths:
        if not path.is_file():
            logger.error("Input file not found: %s", path)
            return EXIT_USAGE_ERROR

    stats = CorpusStatistics()
    exported: Set[Path] = set()
    status = EXIT_OK
    if not args.quiet:
        print(format_header())
    for path in paths:
        logger.info("Reading %s", path)
        if not analyze_file(path, stats, settings, print_rows=not args.quiet, exported=exported):
            status = EXIT_RECORD_ERROR
            break

    if not args.quiet:
        print()
    print(stats.format_summary(tablefmt=settings.tablefmt))
    return status


if __name__ == '__main__':
    sys.exit(main())
