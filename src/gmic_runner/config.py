"""
Configuration File Support

Loads default option values from a TOML or YAML file. Values given on
the command line take precedence.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from gmic_runner.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENGINE_ENV_VAR = "GMIC_RUNNER_ENGINE"


@dataclass(slots=True)
class RunnerConfig:
    """Option defaults read from a configuration file.

    Attributes:
        input: Input image path.
        output_folder: Output folder path.
        engine: Engine name.
    """

    input: str | None = None
    output_folder: str | None = None
    engine: str | None = None

    def merged_with(self, **overrides: Any) -> "RunnerConfig":
        """Return a copy where every non-empty override replaces the stored value."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({key: value for key, value in overrides.items() if value})
        return RunnerConfig(**values)


def _read_mapping(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with path.open("rb") as handle:
                return tomllib.load(handle)
        if suffix in (".yaml", ".yml"):
            with path.open("r", encoding="utf-8") as handle:
                return yaml.safe_load(handle) or {}
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid configuration file {path}: {exc}") from exc
    raise ConfigError(f"Unsupported configuration format '{suffix}' (use .toml, .yaml or .yml)")


def load_config(path: str | Path | None) -> RunnerConfig:
    """
    Load option defaults from a configuration file.

    Args:
        path: TOML or YAML file, or None for no file.

    Returns:
        Defaults from the file. The engine falls back to the
        ``GMIC_RUNNER_ENGINE`` environment variable when the file does
        not name one.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
        FileNotFoundError: If the file does not exist.
    """
    data: Any = {}
    if path is not None:
        path = Path(path)
        data = _read_mapping(path)
        logger.debug("Loaded configuration from %s", path)

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a table of options")

    known = {f.name for f in fields(RunnerConfig)}
    values: dict[str, str | None] = {}
    for key, value in data.items():
        key = str(key).replace("-", "_")
        if key not in known:
            logger.warning("Ignoring unknown configuration option '%s'", key)
            continue
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"Configuration option '{key}' must be a string")
        values[key] = value

    if not values.get("engine") and os.environ.get(ENGINE_ENV_VAR):
        values["engine"] = os.environ[ENGINE_ENV_VAR]

    return RunnerConfig(**values)
