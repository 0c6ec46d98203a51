"""Main CLI entry point for the ``tagtree`` command-line tool.

The command line is a thin client of the public API: it parses files with
``parse_file`` and answers lookups with ``child_at`` / ``find_tag`` /
``find_by_path`` / ``attr``.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tagtree import __version__
from tagtree.api import TagTreeParser
from tagtree.shared.config import ParserConfig
from tagtree.shared.errors import ConfigValidationError
from tagtree.shared.logging import get_logger
from tagtree.tree import Node, attr, child_at, destroy, find_by_path, find_tag

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagtree",
        description="Parse XML-like markup into a tree and query it",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Quiet output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse files and report results")
    parse_parser.add_argument("paths", nargs="+", type=Path, help="Files to parse")
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )
    _add_config_arguments(parse_parser)

    query_parser = subparsers.add_parser("query", help="Look up one node in a file")
    query_parser.add_argument("path", type=Path, help="File to parse")
    selector = query_parser.add_mutually_exclusive_group(required=True)
    selector.add_argument("--tag", help="First tag in document order with this name")
    selector.add_argument("--path", dest="tag_path", help="Tag path such as a/b/c")
    selector.add_argument(
        "--child",
        type=int,
        action="append",
        metavar="INDEX",
        help="Child index from the root; repeat to descend further"
    )
    query_parser.add_argument(
        "--substring",
        action="store_true",
        help="Match tag names by substring instead of exactly"
    )
    query_parser.add_argument("--attr", help="Print this attribute instead of the text")
    _add_config_arguments(query_parser)

    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on mismatched, extra or unclosed tags"
    )


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from ``--config`` and ``--strict``."""
    config = ParserConfig()
    if args.config:
        config = ParserConfig.from_json(args.config.read_text())
    if args.strict:
        config = config.override(scanner__strict_end_tags=True)
    return config


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format parse summaries for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    lines = []
    successful = sum(1 for r in results if r.get("success", False))
    lines.append(f"Parsed {len(results)} files, {successful} successful")
    lines.append("-" * 60)

    for result in results:
        status = "OK  " if result.get("success", False) else "FAIL"
        lines.append(f"{status} {result.get('source', '?')}")
        if result.get("success", False):
            time_ms = result.get("performance", {}).get("processing_time_ms", 0.0)
            lines.append(
                f"     Elements: {result.get('element_count', 0)}, "
                f"Attributes: {result.get('attribute_count', 0)}, "
                f"Time: {time_ms:.1f}ms"
            )
        else:
            lines.append(f"     Error: {result.get('error', 'unknown error')}")
        for diagnostic in result.get("diagnostics", []):
            if diagnostic.get("severity") == "WARNING":
                lines.append(f"     Warning: {diagnostic.get('message', '')}")

    return "\n".join(lines)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    parser = TagTreeParser(load_config(args))
    results = []
    for path in args.paths:
        result = parser.parse_file(path)
        results.append(result.summary())
        destroy(result)

    print(format_results(results, args.format))
    return EXIT_OK if parser.statistics["successful_parses"] == len(results) else EXIT_FAILURE


def _select(root: Node, args: argparse.Namespace) -> Optional[Node]:
    exact = not args.substring
    if args.tag is not None:
        return find_tag(root, args.tag, exact)
    if args.tag_path is not None:
        return find_by_path(root, args.tag_path, exact)
    node: Optional[Node] = root
    for index in args.child:
        node = child_at(node, index)
        if node is None:
            return None
    return node


def cmd_query(args: argparse.Namespace) -> int:
    """Handle query command."""
    result = TagTreeParser(load_config(args)).parse_file(args.path)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        node = _select(result.root, args)
        if node is None:
            print("Not found", file=sys.stderr)
            return EXIT_FAILURE
        if args.attr is not None:
            value = attr(node, args.attr)
            if value is None:
                print(f"Attribute not found: {args.attr}", file=sys.stderr)
                return EXIT_FAILURE
            print(value)
        elif node.text is not None:
            print(node.text)
        return EXIT_OK
    finally:
        destroy(result)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=logging.WARNING)

    logger = get_logger(__name__, None, "cli")
    try:
        if args.command == "parse":
            return cmd_parse(args)
        if args.command == "query":
            return cmd_query(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return EXIT_USAGE
    except (ConfigValidationError, OSError) as e:
        logger.warning("Could not load configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
