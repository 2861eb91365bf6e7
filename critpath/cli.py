"""Command line interface for critpath.

Builds a graph from edges given on the command line and prints its
topological order, its source and sink nodes, or the longest path between
two nodes.
"""

import argparse
import sys

from critpath.config import CritpathConfig, load_config
from critpath.graph import GraphError, WeightedGraph, format_nodes
from critpath.log_config import LOG_LEVELS, configure_logging, get_logger

logger = get_logger(__name__)


def parse_edge(value: str) -> tuple[str, str, int]:
    """Convert an ``-e SRC:DST[:WEIGHT]`` option into an edge tuple.

    Raises:
        argparse.ArgumentTypeError: If the option has the wrong number of
            parts, an empty node name, or a non-integer weight
    """
    values = value.split(":")
    if len(values) not in (2, 3) or not all(values[:2]):
        msg = f"edge must look like SRC:DST[:WEIGHT], got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    src, dst = values[0], values[1]
    if len(values) == 2:
        return src, dst, 1
    try:
        weight = int(values[2])
    except ValueError as e:
        msg = f"edge weight must be an integer, got {values[2]!r}"
        raise argparse.ArgumentTypeError(msg) from e
    return src, dst, weight


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="critpath",
        description="Topological order and critical paths of a weighted DAG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Topological order
  critpath -e a:b -e b:c topo

  # Longest path with weights
  critpath -e a:b:2 -e b:d:3 -e a:c:1 -e c:d:5 longest a d

  # Source and sink nodes, custom separator from a config file
  critpath --config critpath.yaml -e a:b ends
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to configuration YAML file (default: critpath.yaml if present)",
    )

    parser.add_argument(
        "-e",
        "--edge",
        dest="edges",
        action="append",
        type=parse_edge,
        metavar="SRC:DST[:WEIGHT]",
        default=[],
        help="Add an edge, weight defaults to 1; repeat for more edges",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=LOG_LEVELS,
        default=None,
        help="Override the configured logging level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("topo", help="Print the nodes in topological order")
    subparsers.add_parser("ends", help="Print the source and sink nodes")
    longest = subparsers.add_parser("longest", help="Print the longest path between two nodes")
    longest.add_argument("src", help="Start node")
    longest.add_argument("dst", help="End node")

    return parser


def run(args: argparse.Namespace, config: CritpathConfig) -> int:
    """Execute the parsed command against the edges given in args.

    Returns:
        Process exit code
    """
    graph = WeightedGraph()
    for src, dst, weight in args.edges:
        graph.add_edge(src, dst, weight)

    separator = config.render.separator

    try:
        if args.command == "topo":
            print(format_nodes(graph.topo_sort(), separator))
        elif args.command == "ends":
            graph.compute_source_and_sink()
            print(f"source: {format_nodes(graph.source, separator)}")
            print(f"sink: {format_nodes(graph.sink, separator)}")
        else:
            result = graph.longest_path(args.src, args.dst)
            print(f"{result.length} {result.render(separator)}")
    except GraphError as e:
        logger.error("command_failed", command=args.command, error=e.message)
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the critpath command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=args.log_level or config.logging.level,
        json_logs=config.logging.json_logs,
    )
    for warning in config.validate_config():
        logger.warning("configuration_warning", message=warning)

    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
