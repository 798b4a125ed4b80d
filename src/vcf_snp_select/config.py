"""Configuration file support for vcf-snp-select."""

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .utils.validators import (
    ValidationError,
    validate_log_level,
    validate_positive_int,
    validate_threshold,
)

logger = logging.getLogger(__name__)

CONFIG_SECTION = "vcf_snp_select"

DEFAULT_CHROMOSOME_ORDER = tuple(
    [f"A{i:02d}" for i in range(1, 14)] + [f"D{i:02d}" for i in range(1, 14)]
)


@dataclass
class SelectConfig:
    """Configuration for SNP selection."""

    window_size: int = 10_000
    qual_threshold: float = 30.0
    af_threshold: float = 0.05
    ld_window_size: int = 20_000
    presorted: bool = True
    keep_singleton_blocks: bool = False
    log_level: str = "INFO"

    # Only used to order chromosomes in the evaluation report
    chromosome_order: tuple[str, ...] = field(default=DEFAULT_CHROMOSOME_ORDER)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    try:
        for key in ("window_size", "ld_window_size"):
            if key in config_dict:
                validate_positive_int(key, config_dict[key])

        if "qual_threshold" in config_dict:
            validate_threshold("qual_threshold", config_dict["qual_threshold"], minimum=0)

        if "af_threshold" in config_dict:
            validate_threshold("af_threshold", config_dict["af_threshold"], minimum=0, maximum=1)

        if "log_level" in config_dict:
            validate_log_level(config_dict["log_level"])
    except ValidationError as e:
        raise ConfigValidationError(str(e)) from e

    for key in ("presorted", "keep_singleton_blocks"):
        if key in config_dict and not isinstance(config_dict[key], bool):
            raise ConfigValidationError(
                f"{key} must be a boolean, got {type(config_dict[key]).__name__}"
            )

    if "chromosome_order" in config_dict:
        order = config_dict["chromosome_order"]
        if not isinstance(order, list | tuple) or not all(isinstance(c, str) for c in order):
            raise ConfigValidationError("chromosome_order must be a list of strings")


def build_config(config_dict: dict[str, Any]) -> SelectConfig:
    """Validate a mapping and turn it into a SelectConfig, ignoring unknown keys."""
    validate_config(config_dict)

    valid_fields = {f.name for f in fields(SelectConfig)}
    unknown = sorted(set(config_dict) - valid_fields)
    if unknown:
        logger.warning("Ignoring unknown configuration key(s): %s", ", ".join(unknown))

    filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}
    if "qual_threshold" in filtered_config:
        filtered_config["qual_threshold"] = float(filtered_config["qual_threshold"])
    if "af_threshold" in filtered_config:
        filtered_config["af_threshold"] = float(filtered_config["af_threshold"])
    if "log_level" in filtered_config:
        filtered_config["log_level"] = filtered_config["log_level"].upper()
    if "chromosome_order" in filtered_config:
        filtered_config["chromosome_order"] = tuple(filtered_config["chromosome_order"])

    return SelectConfig(**filtered_config)


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> SelectConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML configuration file.
        overrides: Optional dict of values to override loaded config.

    Returns:
        SelectConfig instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If the file is not valid TOML or any value is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    config_dict = dict(toml_data.get(CONFIG_SECTION, {}))

    if overrides:
        config_dict.update(overrides)

    return build_config(config_dict)
