"""
Processing Engines

Engines available to the CLI, looked up by name.
"""

from gmic_runner.engine.base import EngineRegistry, ProcessingEngine
from gmic_runner.engine.dryrun import DryRunEngine
from gmic_runner.engine.gmic_engine import GmicEngine

DEFAULT_ENGINE = "gmic"


def default_registry() -> EngineRegistry:
    """Build a registry holding every built-in engine."""
    return EngineRegistry([GmicEngine(), DryRunEngine()])


def get_engine(name: str = DEFAULT_ENGINE) -> ProcessingEngine:
    """
    Look up a built-in engine by name.

    Raises:
        ArgumentError: If no engine has that name.
    """
    return default_registry().get(name)


__all__ = [
    "DEFAULT_ENGINE",
    "DryRunEngine",
    "EngineRegistry",
    "GmicEngine",
    "ProcessingEngine",
    "default_registry",
    "get_engine",
]
