#cli.py - Command-line front end: scan a directory and save the dependency graph as JSON.

import argparse
import logging
import sys
import threading
from typing import Any, Dict

from cntxtmap import __version__
from cntxtmap.config import load_config
from cntxtmap.dispatcher import DependencyAnalyzer
from cntxtmap.errors import CntxtMapError
from cntxtmap.graph import graph_stats, save_graph
from cntxtmap.models import GraphData

DEFAULT_OUTPUT = "code_dependency_graph.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cntxtmap",
        description="Build a file-level dependency graph for JS/TS project trees.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (default: current directory)",
    )
    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT,
        help=f"Output JSON path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--ignore",
        nargs="*",
        default=None,
        metavar="NAME",
        help="Additional file or directory names to skip",
    )
    parser.add_argument(
        "--no-content",
        action="store_true",
        help="Leave file contents out of the graph",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Show a matplotlib preview after saving",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def print_stats(graph_data: GraphData) -> None:
    stats = graph_stats(graph_data)
    rows: Dict[str, int] = {
        "Total Nodes": stats["total_nodes"],
        "Total Links": stats["total_links"],
        "Total Projects": stats["total_projects"],
    }
    for node_type, count in sorted(stats["nodes_by_type"].items()):
        rows[f"  {node_type}"] = count

    print("\nCodebase Statistics:")
    print("-------------------")
    # Calculate max length for padding
    max_len = max(len(key) for key in rows)
    for key, value in rows.items():
        print(f"{key:<{max_len + 2}}: {value:,}")


def _wait_for(worker: threading.Thread) -> None:
    # Short joins keep the main thread responsive to Ctrl-C.
    while worker.is_alive():
        worker.join(0.1)


def run_scan(analyzer: DependencyAnalyzer, path: str, cancel_event: threading.Event) -> GraphData:
    """Scan on a worker thread; Ctrl-C sets *cancel_event* and waits for it to stop."""
    outcome: Dict[str, Any] = {}

    def scan():
        try:
            outcome["graph"] = analyzer.analyze_dependencies(path, cancel_event=cancel_event)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=scan, name="cntxtmap-scan", daemon=True)
    worker.start()
    try:
        _wait_for(worker)
    except KeyboardInterrupt:
        cancel_event.set()
        worker.join()
        raise

    if "error" in outcome:
        raise outcome["error"]
    return outcome["graph"]


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    config = load_config(args.path)
    if args.ignore:
        config = config.with_ignore(args.ignore)
    if args.no_content:
        config.include_content = False

    cancel_event = threading.Event()
    try:
        print("Code Dependency Graph Generator")
        print("-------------------------------")
        print("\nAnalyzing codebase...")
        analyzer = DependencyAnalyzer(config)
        graph_data = run_scan(analyzer, args.path, cancel_event)

        print("\nSaving graph...")
        save_graph(graph_data, args.output)
        print(f"\nCode dependency graph saved to {args.output}")

        print_stats(graph_data)
        if analyzer.warnings:
            print(f"\n{len(analyzer.warnings)} warning(s) during the scan; rerun with -v for details.")

        if args.visualize:
            print("\nGenerating visualization...")
            from cntxtmap.visualize import visualize_graph
            visualize_graph(graph_data)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 130
    except (CntxtMapError, OSError) as e:
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    print("\nDone.")
    return 0
