"""
Error Taxonomy

Exception types raised by the pipeline and the mapping from error
categories to process exit codes.
"""

from enum import IntEnum


class GmicRunnerError(Exception):
    """Base class for errors raised by gmic_runner."""


class ArgumentError(GmicRunnerError):
    """Malformed or missing option value."""


class ConfigError(ArgumentError):
    """Configuration file could not be read or holds invalid values."""


class DecodeError(GmicRunnerError):
    """Input file is not a decodable image."""


class EngineFault(GmicRunnerError):
    """The processing engine reported a failure."""


class ResourceExhaustionError(GmicRunnerError):
    """An image is too large to be held in memory."""


class UnsupportedOperationError(GmicRunnerError):
    """The requested operation is not available in this environment."""


class OperationCancelledError(GmicRunnerError):
    """Raised by an engine to acknowledge a cancellation request."""


class ExitCode(IntEnum):
    """Process exit codes, one per error category."""

    OK = 0
    FAILURE = 1
    ARGUMENT = 2
    IO = 3
    DECODE = 4
    ENGINE = 5
    PERMISSION = 6
    RESOURCE = 7
    UNSUPPORTED = 8
    CANCELLED = 130


# Ordered: subclasses must precede their bases.
_EXIT_CODES: tuple[tuple[type[BaseException], ExitCode], ...] = (
    (ArgumentError, ExitCode.ARGUMENT),
    (DecodeError, ExitCode.DECODE),
    (EngineFault, ExitCode.ENGINE),
    (ResourceExhaustionError, ExitCode.RESOURCE),
    (UnsupportedOperationError, ExitCode.UNSUPPORTED),
    (OperationCancelledError, ExitCode.CANCELLED),
    (PermissionError, ExitCode.PERMISSION),
    (OSError, ExitCode.IO),
    (MemoryError, ExitCode.RESOURCE),
    (NotImplementedError, ExitCode.UNSUPPORTED),
    (ValueError, ExitCode.ARGUMENT),
)


def exit_code_for(exc: BaseException) -> ExitCode:
    """
    Map an exception to the exit code of its error category.

    Args:
        exc: Exception that reached the top level.

    Returns:
        Exit code for the category, ``ExitCode.FAILURE`` when the exception
        belongs to no known category.
    """
    for exc_type, code in _EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return ExitCode.FAILURE
