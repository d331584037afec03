"""
Command-Line Interface for G'MIC Runner

Parses the options, configures logging and hands the run to
:mod:`gmic_runner.cli_handlers`.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from gmic_runner.cli_handlers import process_run

USAGE_EPILOG = """\
Any argument that is not one of the options above is passed to G'MIC, in order.
Commands that begin like an option (-input, -output, -verbose, ...) must follow
'--', for example:
  gmic-runner -i photo.jpg -o out -- -blur 3 -output result.png
"""


def setup_logging(verbose: int) -> None:
    """
    Setup logging with multi-level verbosity.

    Verbosity levels:
        -vv = DEBUG
        -v = INFO
        default = WARNING

    Args:
        verbose: Number of ``-v`` flags given.
    """
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
    }

    log_level = level_map.get(verbose, logging.DEBUG)

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        Parser for the ``gmic-runner`` command.
    """
    parser = argparse.ArgumentParser(
        prog="gmic-runner",
        usage="%(prog)s [OPTIONS] G'MIC commands",
        description="Runs the specified G'MIC commands",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-i",
        "--input",
        type=str,
        default=None,
        help="The input image path.",
    )
    parser.add_argument(
        "-o",
        "--output-folder",
        dest="output_folder",
        type=str,
        default=None,
        help="The output folder path. Defaults to a new folder next to the program.",
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Processing engine: 'gmic' (default) or 'dryrun'.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (TOML/YAML) with default option values.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v INFO, -vv DEBUG). Default shows only warnings and errors.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    """
    Parse command-line arguments.

    Options may appear anywhere. Every other argument, including unknown
    options such as ``-blur``, becomes a command token in its original
    order; the first "--" only ends option parsing.

    Args:
        argv: Arguments without the program name. Defaults to ``sys.argv[1:]``.

    Returns:
        The parser (for printing usage) and the parsed arguments.
    """
    parser = build_parser()
    args, commands = parser.parse_known_args(argv)
    if "--" in commands:
        commands.remove("--")
    args.commands = commands
    return parser, args


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for CLI.

    Args:
        argv: Arguments without the program name.

    Returns:
        Process exit code.
    """
    parser, args = parse_args(argv)

    setup_logging(args.verbose)

    # Nothing to run: show usage.
    if not args.commands:
        parser.print_help()
        return 0

    return process_run(args)


if __name__ == "__main__":
    sys.exit(main())
