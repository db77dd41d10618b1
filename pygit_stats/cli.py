"""CLI entry point: main() function."""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path

from pygit_stats.aggregator import StatsAggregator
from pygit_stats.config import create_argument_parser, load_config_file, normalize_order_args, positive_int
from pygit_stats.models import SortSpec, StatsConfig
from pygit_stats.output import ConsoleOutputHandler
from pygit_stats.renderer import ReportRenderer
from pygit_stats.repository import COLOR_MODES, resolve_color


def _explicit_dests(parser: argparse.ArgumentParser, argv: list[str]) -> set[str]:
    """Return the destinations of options given explicitly on the command line."""
    options = argv[:argv.index('--')] if '--' in argv else argv
    explicit = set()
    for action in parser._actions:
        if action.dest in ('help', 'version'):
            continue
        for opt_string in action.option_strings:
            attached = len(opt_string) == 2 and not opt_string.startswith('--')
            if any(
                arg == opt_string
                or arg.startswith(opt_string + '=')
                or (attached and arg.startswith(opt_string) and not arg.startswith('--'))
                for arg in options
            ):
                explicit.add(action.dest)
                break
    return explicit


def build_config(parser: argparse.ArgumentParser, argv: list[str]) -> tuple[StatsConfig, str]:
    """Merge CLI arguments over the config file. Returns the config and the color mode.

    Invalid values, wherever they come from, end the process with a usage error.
    """
    argv = normalize_order_args(argv)
    args = parser.parse_args(argv)
    file_config = load_config_file(Path.cwd(), args.config)
    cli_explicit = _explicit_dests(parser, argv)

    def effective(dest: str, toml_key: str):
        if dest in cli_explicit:
            return getattr(args, dest)
        if toml_key in file_config:
            return file_config[toml_key]
        return getattr(args, dest)

    order = effective('order', 'order')
    if not isinstance(order, SortSpec):
        try:
            order = SortSpec.parse(str(order))
        except ValueError as e:
            parser.error(f"config file: {e}")

    patterns = {}
    for key in ('include', 'exclude'):
        value = effective(key, key)
        if value is not None:
            try:
                re.compile(value)
            except (re.error, TypeError) as e:
                parser.error(f"invalid {key} pattern {value!r}: {e}")
        patterns[key] = value or None

    repos = effective('repos', 'repos')
    if isinstance(repos, str):
        repos = [repos]

    color_mode = effective('color', 'color')
    if color_mode not in COLOR_MODES:
        parser.error(f"invalid color mode {color_mode!r} (choose from {', '.join(COLOR_MODES)})")

    sizes = {}
    for key in ('max_name_width', 'max_workers'):
        value = effective(key, key)
        try:
            sizes[key] = positive_int(str(value))
        except (ValueError, argparse.ArgumentTypeError) as e:
            parser.error(f"config file: invalid {key} {value!r}: {e}")

    sentinel = str(file_config.get('sentinel', '+'))
    if not sentinel:
        parser.error("config file: sentinel must not be empty")

    config = StatsConfig(
        include=patterns['include'],
        exclude=patterns['exclude'],
        sort=order,
        repos=[str(r) for r in repos or []],
        log_args=list(args.log_args),
        sentinel=sentinel,
        max_name_width=sizes['max_name_width'],
        json_output=bool(effective('json_output', 'json_output')),
        verbose=bool(effective('verbose', 'verbose')),
        parallel=bool(effective('parallel', 'parallel')),
        max_workers=sizes['max_workers'],
    )
    return config, color_mode


def main(argv: list[str] | None = None):
    """Main entry point"""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_argument_parser()
    config, color_mode = build_config(parser, argv)

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Color is decided once per run and handed to everything that prints
    use_color = not config.json_output and resolve_color(color_mode)
    config = config.with_updates(use_color=use_color)

    output = ConsoleOutputHandler(verbose=config.verbose, use_color=use_color)
    renderer = ReportRenderer(output, use_color=use_color, max_name_width=config.max_name_width)

    try:
        table = StatsAggregator(config, output).collect()

        if config.json_output:
            renderer.render_json(table)
        else:
            renderer.render(table)

        sys.exit(0)

    except KeyboardInterrupt:
        if not config.json_output:
            output.warning("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        if config.json_output:
            print(json.dumps({'error': str(e)}, indent=2))
        else:
            output.error(f"\nUnexpected error: {e}")
            if config.verbose:
                import traceback
                traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
