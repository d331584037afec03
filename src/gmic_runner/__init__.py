"""
G'MIC Runner - command-line front end that runs a G'MIC command script
over an optional input image and saves the resulting images as PNG files.
"""

__version__ = "0.1.0"


def main() -> int:
    """Run the G'MIC Runner command-line interface.

    Returns
    -------
    int
        Exit code propagated from the CLI handler. A ``0`` is used when the
        handler completes without explicitly returning an exit status.

    Notes
    -----
    Keeps the console-script entry point cheap to import; the CLI module
    (and through it Pillow and numpy) is only loaded when invoked.
    """

    from gmic_runner.cli import main as cli_main

    exit_code = cli_main()
    return int(exit_code) if exit_code is not None else 0


__all__ = ["main"]
