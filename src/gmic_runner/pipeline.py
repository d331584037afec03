"""
Run Pipeline

Load the optional input, join the commands, run the engine once and save
the results. The input image is released on every exit path.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from gmic_runner.commands import build_command_string
from gmic_runner.engine.base import ProcessingEngine
from gmic_runner.images import InputImage, load_input_image
from gmic_runner.invoker import ExecutionOutcome, ProcessingInvoker, Succeeded
from gmic_runner.output_writer import OutputWriter
from gmic_runner.utils.cancellation import CancellationBridge, CancellationToken

logger = logging.getLogger(__name__)


def run_pipeline(
    commands: Sequence[str | None],
    engine: ProcessingEngine,
    input_path: str | Path | None = None,
    output_folder: str | Path | None = None,
    writer: OutputWriter | None = None,
    cancellation: CancellationToken | None = None,
    install_signal_handler: bool = True,
) -> ExecutionOutcome:
    """
    Run one command script end to end.

    Args:
        commands: Command tokens, joined with single spaces.
        engine: Engine that executes the script.
        input_path: Optional input image file.
        output_folder: Output folder; ignored when ``writer`` is given.
        writer: Writer for the result images.
        cancellation: Token for this run. A fresh one is created if omitted.
        install_signal_handler: Route SIGINT to the token while the engine
            runs.

    Returns:
        The engine outcome. When it is a non-empty ``Succeeded`` the result
        images have been written and released.

    Raises:
        OSError: If the input cannot be read or an output cannot be written.
        DecodeError: If the input is not an image.
    """
    writer = writer or OutputWriter(output_folder)
    cancellation = cancellation or CancellationToken()
    input_images: list[InputImage] = []

    try:
        if input_path:
            input_images.append(load_input_image(input_path))

        command = build_command_string(commands)
        logger.debug("Command string: %r", command)

        invoker = ProcessingInvoker(engine)
        bridge = CancellationBridge(cancellation)
        if install_signal_handler:
            bridge.setup_signal_handler()
        try:
            outcome = invoker.run(command, input_images, cancellation)
        finally:
            bridge.cleanup()

        if isinstance(outcome, Succeeded) and outcome.images:
            try:
                writer.write(outcome.images)
            finally:
                for image in outcome.images:
                    image.release()

        return outcome
    finally:
        for image in input_images:
            image.release()
