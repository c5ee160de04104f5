"""
Config check use case — validate witdart.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from witdart.core.config.loader import (
    BUILD_CONFIG_FILE,
    BuildTarget,
    find_config_file,
    load_build_config,
)
from witdart.core.errors import ConfigError


@dataclass
class ConfigCheckResult:
    """Result of build configuration validation."""

    valid: bool = False
    target: BuildTarget | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        config = self.target.config if self.target else None
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "input": config.inputs.input_path if config else None,
            "output": self.target.output_path if self.target else None,
            "options": config.model_dump(mode="json", exclude={"inputs"}) if config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate a build configuration and report issues.

    Args:
        config_path: Optional explicit path to witdart.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append(f"No {BUILD_CONFIG_FILE} found.")
        return result
    result.config_path = config_path

    try:
        target = load_build_config(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.target = target

    # Semantic checks
    input_path = Path(target.config.inputs.input_path)
    if not input_path.exists():
        result.warnings.append(f"Input file does not exist yet: {input_path}")
    elif input_path.suffix != ".wit":
        result.warnings.append(f"Input file does not have a .wit suffix: {input_path}")

    if target.output_path is not None and not target.output_path.endswith(".dart"):
        result.warnings.append(f"Output file does not have a .dart suffix: {target.output_path}")

    result.valid = len(result.errors) == 0
    return result
