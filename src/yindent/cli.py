"""
CLI interface for yindent.

Reindents YAML files (or stdin) to a fixed indent size, in place or to stdout,
or just reports which files would change.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from .config import IndentsStyle, get_config
from .formats import yaml as _yaml  # noqa: F401 - ensure yaml format is registered
from .formats.base import FormatStrategy, registry
from .indents import reindent

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="yindent",
        description="Normalize the indentation of YAML documents, comments included",
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Input files (reads stdin and writes stdout if not provided)",
    )

    parser.add_argument(
        "--indent",
        "-i",
        type=int,
        help="Spaces per indentation step (default: from config, 2)",
    )

    parser.add_argument(
        "--no-marker-spacing",
        action="store_false",
        dest="marker_spacing",
        default=None,
        help="Keep the spacing after '-' markers as written",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report files that would be reindented; exit 1 if any",
    )

    parser.add_argument(
        "--in-place",
        action="store_true",
        help="Rewrite files instead of printing the result",
    )

    parser.add_argument(
        "--type",
        type=str,
        dest="format_type",
        help="Force format type (e.g., yaml)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every rewritten prefix",
    )

    return parser.parse_args(args)


def resolve_style(parsed: argparse.Namespace) -> IndentsStyle:
    """Configured style with CLI flags applied on top."""
    style = get_config().indents
    changes = {}
    if parsed.indent is not None:
        changes["indent_size"] = parsed.indent
    if parsed.marker_spacing is not None:
        changes["normalize_marker_spacing"] = parsed.marker_spacing
    return replace(style, **changes)


def read_input(filepath: str | None) -> str:
    """Read from file or stdin, keeping line endings as they are."""
    if filepath:
        with open(filepath, encoding="utf-8", newline="") as f:
            return f.read()
    return sys.stdin.read()


def get_strategy(
    content: str,
    filename: str | None,
    force_type: str | None,
) -> FormatStrategy:
    """Get format strategy via override, detection, or fallback to yaml."""
    if force_type:
        strategy = registry.lookup(force_type)
        if strategy:
            return strategy
        raise ValueError(f"Unknown format type: {force_type}")

    strategy = registry.detect(content, filename)
    if strategy:
        return strategy

    fallback = registry.lookup("yaml")
    if fallback:
        return fallback

    raise RuntimeError("No format strategy available")


def format_text(
    content: str,
    filename: str | None = None,
    style: IndentsStyle | None = None,
    format_type: str | None = None,
) -> str:
    """
    Reindent content.

    Args:
        content: Source text
        filename: Optional filename for format detection
        style: Indent settings; the configured style when omitted
        format_type: Force specific format strategy

    Returns:
        Reindented text
    """
    strategy = get_strategy(content, filename, format_type)
    tree = strategy.parse(content)
    return strategy.render(reindent(tree, style))


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        style = resolve_style(parsed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not parsed.files:
        content = read_input(None)
        try:
            result = format_text(content, style=style, format_type=parsed.format_type)
        except ValueError as e:
            print(f"Error: <stdin>:{e}", file=sys.stderr)
            return 1
        if parsed.check:
            if result != content:
                print("would reindent <stdin>", file=sys.stderr)
                return 1
            return 0
        sys.stdout.write(result)
        return 0

    status = 0
    for filename in parsed.files:
        try:
            content = read_input(filename)
        except FileNotFoundError:
            print(f"Error: File not found: {filename}", file=sys.stderr)
            status = 1
            continue
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {filename}: {e}", file=sys.stderr)
            status = 1
            continue

        try:
            result = format_text(content, filename, style, parsed.format_type)
        except ValueError as e:
            print(f"Error: {filename}:{e}", file=sys.stderr)
            status = 1
            continue

        changed = result != content
        if parsed.check:
            if changed:
                print(f"would reindent {filename}")
                status = 1
        elif parsed.in_place:
            if changed:
                with open(filename, "w", encoding="utf-8", newline="") as f:
                    f.write(result)
                logger.info("reindented %s", filename)
        else:
            sys.stdout.write(result)

    return status


if __name__ == "__main__":
    sys.exit(main())
