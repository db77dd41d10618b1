"""Configuration: argument parser and config file loader."""

from __future__ import annotations

import argparse
import os
import re
import sys
from pathlib import Path
from typing import Any

from pygit_stats.models import SortField, SortSpec
from pygit_stats.renderer import DEFAULT_NAME_WIDTH
from pygit_stats.repository import COLOR_MODES

try:
    import tomllib
except ModuleNotFoundError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_FILENAME = '.pygitstatsrc.toml'
ORDER_OPTIONS = ('-o', '--order')
ORDER_VALUE = re.compile(r'^[+-]?(' + '|'.join(SortField.names()) + r')$', re.IGNORECASE)


def sort_spec(value: str) -> SortSpec:
    """argparse type for -o/--order."""
    try:
        return SortSpec.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def regex(value: str) -> str:
    """argparse type that only accepts compilable regular expressions."""
    try:
        re.compile(value)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"invalid regular expression '{value}': {e}") from None
    return value


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def normalize_order_args(argv: list[str]) -> list[str]:
    """Attach dash-prefixed order values to their option.

    argparse reads `-o -delta` as two options; `--order=-delta` is unambiguous.
    Arguments after `--` are left alone.
    """
    result: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == '--':
            result.extend(argv[i:])
            break
        if arg in ORDER_OPTIONS and i + 1 < len(argv) and ORDER_VALUE.match(argv[i + 1]):
            result.append(f"--order={argv[i + 1]}")
            i += 2
            continue
        result.append(arg)
        i += 1
    return result


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all pygit-stats flags."""
    # Lazy import to avoid circular dependency with __init__.py
    from pygit_stats import __version__

    parser = argparse.ArgumentParser(
        prog='pygit-stats',
        description="Per-author commit statistics from git log --numstat",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Examples:
  %(prog)s                                   # Whole history, biggest delta first
  %(prog)s -- v1.0..HEAD                     # Revision range
  %(prog)s -o author -e '^vendor/'           # Alphabetical, skip vendored files
  %(prog)s -o -files -i '\\.py$'              # Python files, most files first
  %(prog)s -r ../api -r ../web -- --since=2024-01-01
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('log_args', nargs='*', metavar='LOG_ARG',
                        help='Extra arguments passed to git log (put them after --)')
    parser.add_argument('-e', '--exclude', type=regex, default=None, metavar='PATTERN',
                        help='Regular expression; matching files are not counted')
    parser.add_argument('-i', '--include', type=regex, default=None, metavar='PATTERN',
                        help='Regular expression; only matching files are counted')
    parser.add_argument('-o', '--order', type=sort_spec, default=SortSpec(), metavar='ORDER',
                        help=f"Sort by {'|'.join(SortField.names())}, optionally prefixed with "
                             "+ (ascending) or - (descending) "
                             "(default: delta descending, author ascending)")
    parser.add_argument('-r', '--repo', dest='repos', action='append', default=[], metavar='PATH',
                        help='Repository to include (can specify multiple; default: current directory)')
    parser.add_argument('--width', dest='max_name_width', type=positive_int, default=DEFAULT_NAME_WIDTH,
                        help=f'Maximum author column width (default: {DEFAULT_NAME_WIDTH})')
    parser.add_argument('--color', choices=COLOR_MODES, default='auto',
                        help="Colorize +/- counts (default: auto, follows git's color.ui)")
    parser.add_argument('--json', dest='json_output', action='store_true',
                        help='Output results as JSON')
    parser.add_argument('--parallel', action='store_true',
                        help='Read multiple repositories in parallel')
    parser.add_argument('--max-workers', type=positive_int, default=min(os.cpu_count() or 4, 8),
                        help='Max parallel workers (default: min(cpu_count, 8))')
    parser.add_argument('--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--config', type=str, default=None,
                        help=f'Path to config file (default: {CONFIG_FILENAME} in current or home dir)')

    return parser


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load .pygitstatsrc.toml from explicit path, search dir, or home dir.

    Returns empty dict if not found or tomllib is unavailable.
    """
    candidates = [Path(config_path)] if config_path else [search_dir / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]
    for path in candidates:
        if path.is_file():
            if tomllib is None:
                print(f"Warning: Found {path} but tomllib/tomli not available (Python 3.11+ or pip install tomli). Ignoring.", file=sys.stderr)
                return {}
            try:
                with open(path, 'rb') as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
                return {}
    if config_path:
        print(f"Warning: Config file '{config_path}' not found. Ignoring.", file=sys.stderr)
    return {}
