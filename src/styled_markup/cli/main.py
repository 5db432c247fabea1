"""Main CLI entry point for the styled-markup command-line tool.

Renders a markup file through the in-memory backend and prints a snapshot of
the resulting view tree, which makes it easy to check how a document will be
laid out without a device.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from styled_markup.api import MarkupParser, get_adapter
from styled_markup.rendering import MemoryBackend
from styled_markup.shared import OptionsValidationError, ParseOptions, get_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the styled-markup tool."""
    parser = argparse.ArgumentParser(
        prog="styled-markup",
        description="Compile styled markup into native view trees",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser(
        "render", help="Render a markup file and print the view tree"
    )
    render_parser.add_argument(
        "path",
        type=Path,
        help="Markup file to render"
    )
    render_parser.add_argument(
        "--format", "-f",
        choices=["json", "xml"],
        default="json",
        help="Snapshot format (default: json)"
    )
    render_parser.add_argument(
        "--platform",
        choices=["ios", "android"],
        default="ios",
        help="Target platform of the in-memory backend"
    )
    render_parser.add_argument(
        "--line-spacing",
        type=float,
        help="Paragraph line spacing of every label"
    )
    render_parser.add_argument(
        "--character-spacing",
        type=float,
        help="Character spacing of every label"
    )
    render_parser.add_argument(
        "--base-font-size",
        type=float,
        help="Base font size of every label"
    )
    render_parser.add_argument(
        "--report",
        action="store_true",
        help="Print the compile report to stderr"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    return parser


def build_options(args: argparse.Namespace) -> ParseOptions:
    """Translate command-line flags to parse options."""
    values: Dict[str, Any] = {}
    if args.line_spacing is not None:
        values["line_spacing"] = args.line_spacing
    if args.character_spacing is not None:
        values["character_spacing"] = args.character_spacing
    if args.base_font_size is not None:
        values["base_font_size"] = args.base_font_size
    return ParseOptions.from_dict(values)


def format_snapshot(container: Any, format_type: str) -> str:
    """Serialize a compiled container.

    Raises:
        ValueError: When the snapshot adapter fails
    """
    if format_type == "xml":
        import xml.etree.ElementTree as ET

        result = get_adapter("elementtree").to_target(container)
        if not result.success:
            raise ValueError("; ".join(result.errors))
        return ET.tostring(result.converted_data, encoding="unicode")

    result = get_adapter("dict").to_json(container)
    if not result.success:
        raise ValueError("; ".join(result.errors))
    return result.converted_data


def cmd_render(args: argparse.Namespace) -> int:
    """Handle render command."""
    logger = get_logger(__name__, None, "cli")
    try:
        markup = args.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {args.path}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        options = build_options(args)
    except OptionsValidationError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return EXIT_FAILURE

    parser = MarkupParser(backend=MemoryBackend(args.platform))
    container = parser.process(markup, options)
    logger.debug("Rendered markup file", extra={"file": str(args.path)})

    try:
        print(format_snapshot(container, args.format))
    except ValueError as e:
        print(f"Cannot serialize view tree: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.report and parser.last_report is not None:
        print(json.dumps(parser.last_report.summary(), indent=2), file=sys.stderr)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.command == "render":
            return cmd_render(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
