"""
Build configuration loader — reads witdart.yml into a generation target.

    input: wit/host.wit          # root WIT file
    output: lib/host.dart        # optional, defaults next to the input
    options:                     # any GeneratorConfig toggle, snake_case
      json_serialization: false
      int64_type: nativeFixed64

Reads YAML, validates against the Pydantic ``GeneratorConfig`` schema and
returns a ``BuildTarget``.  Relative paths are resolved against the
directory holding the config file, never the working directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from witdart.core.errors import ConfigError
from witdart.core.models.config import FileSystemPaths, GeneratorConfig

logger = logging.getLogger(__name__)

# Searched for in the cwd and its parents
BUILD_CONFIG_FILE = "witdart.yml"

_TOP_LEVEL_KEYS = ("input", "output", "options")


class BuildTarget(BaseModel):
    """One generation described by witdart.yml.

    Attributes:
        config:      Generator config with an absolute ``FileSystemPaths`` input.
        output_path: Absolute output path, or None for the default.
    """

    model_config = ConfigDict(frozen=True)

    config: GeneratorConfig
    output_path: str | None = None


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest witdart.yml in ``start_dir`` (default: cwd) or any parent."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / BUILD_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def read_config_data(path: Path) -> dict:
    """Top-level mapping of a witdart.yml file.

    Raises:
        ConfigError: If the file is missing, unreadable, not YAML or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict):
        return data
    raise ConfigError(f"{path} must hold a YAML mapping, got {type(data).__name__}")


def _resolve(base: Path, value: object, key: str, path: Path) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' in {path} must be a non-empty string")
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = base / candidate
    return str(candidate.resolve())


def load_build_config(path: Path | None = None) -> BuildTarget:
    """Load and validate a build configuration.

    Args:
        path: Explicit path to witdart.yml. If None, searches upward.

    Returns:
        Validated BuildTarget.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        raise ConfigError(
            f"No {BUILD_CONFIG_FILE} found. "
            "Create one next to your WIT files, or specify --config."
        )

    logger.debug("Loading build config from %s", path)
    data = read_config_data(path)

    unknown = sorted(set(data) - set(_TOP_LEVEL_KEYS))
    if unknown:
        raise ConfigError(f"Unknown key(s) in {path}: {', '.join(unknown)}")
    if "input" not in data:
        raise ConfigError(f"Missing required key 'input' in {path}")

    base = path.parent.resolve()
    input_path = _resolve(base, data["input"], "input", path)
    output_path = None
    if data.get("output") is not None:
        output_path = _resolve(base, data["output"], "output", path)

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigError(f"'options' in {path} must be a mapping, got {type(options).__name__}")
    if "inputs" in options:
        raise ConfigError(f"'options' in {path} cannot set 'inputs'; use the top-level 'input' key")

    try:
        config = GeneratorConfig.model_validate({
            "inputs": FileSystemPaths(input_path=input_path),
            **options,
        })
    except ValidationError as e:
        raise ConfigError(f"Invalid generator options in {path}: {e}") from e

    logger.info("Loaded build config for %s", input_path)
    return BuildTarget(config=config, output_path=output_path)
