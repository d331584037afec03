"""CLI command handlers for G'MIC Runner."""

from __future__ import annotations

import argparse
import logging

from gmic_runner.config import load_config
from gmic_runner.engine import DEFAULT_ENGINE, get_engine
from gmic_runner.exceptions import ExitCode, exit_code_for
from gmic_runner.invoker import Cancelled, Faulted
from gmic_runner.pipeline import run_pipeline


def process_run(args: argparse.Namespace) -> int:
    """Run the G'MIC commands given on the command line.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed CLI arguments.

    Returns
    -------
    int
        Exit code where ``0`` indicates success. Every other value names
        one error category (see :class:`gmic_runner.exceptions.ExitCode`).
    """
    try:
        config = load_config(args.config).merged_with(
            input=args.input,
            output_folder=args.output_folder,
            engine=args.engine,
        )
        engine = get_engine(config.engine or DEFAULT_ENGINE)

        outcome = run_pipeline(
            args.commands,
            engine,
            input_path=config.input,
            output_folder=config.output_folder,
        )
    except KeyboardInterrupt:
        logging.warning("Interrupted by user")
        return ExitCode.CANCELLED
    except Exception as exc:  # noqa: BLE001
        logging.error("%s", exc)
        logging.debug("Run failed", exc_info=exc)
        return exit_code_for(exc)

    if isinstance(outcome, Faulted):
        logging.error("Error running G'MIC: %s", outcome.message)
        code = exit_code_for(outcome.error)
        return ExitCode.ENGINE if code is ExitCode.FAILURE else code

    if isinstance(outcome, Cancelled):
        logging.info("G'MIC run cancelled")
        return ExitCode.CANCELLED

    if not outcome.images:
        logging.info("G'MIC produced no output images")

    return ExitCode.OK
