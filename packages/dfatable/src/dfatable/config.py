"""CLI configuration.

Settings come from, in increasing precedence: built-in defaults, an
optional YAML/JSON config file, ``DFATABLE_*`` environment variables and
finally command-line options.

Config file format (``dfatable.yaml``):
    ```yaml
    log_level: ${DFATABLE_LOG:-INFO}
    output_format: json
    color: false
    ```

String values of the form ``${VAR}``, ``${VAR:-default}`` and
``${VAR:?message}`` are resolved from the environment.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from dfatable.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DFATABLE_"
OUTPUT_FORMATS = ("text", "json", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CLIConfig:
    """Settings for the ``dfatable`` command.

    Attributes:
        log_level: Root logging level name
        output_format: Default target format for ``convert``
        color: Whether console output uses color
    """

    log_level: str = "WARNING"
    output_format: str = "text"
    color: bool = True

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check field values.

        Raises:
            ConfigurationError: If a value is not allowed
        """
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level!r}",
                context={"key": "log_level", "allowed": list(LOG_LEVELS)},
            )
        self.log_level = self.log_level.upper()
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Invalid output format: {self.output_format!r}",
                context={"key": "output_format", "allowed": list(OUTPUT_FORMATS)},
            )
        if not isinstance(self.color, bool):
            raise ConfigurationError(
                f"Invalid color setting: {self.color!r}",
                context={"key": "color"},
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CLIConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                context={"unknown": unknown, "available": sorted(known)},
            )
        data = dict(data)
        # Substituted env values arrive as strings
        if isinstance(data.get("color"), str):
            data["color"] = _parse_bool(data["color"])
        return cls(**data)


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean value: {value!r}", context={"value": value})


def resolve_environment_vars(config: Any) -> Any:
    """Resolve environment variable references in configuration values.

    Supports:
    - ${VAR_NAME} - Required variable
    - ${VAR_NAME:-default} - Variable with default value
    - ${VAR_NAME:?error message} - Required with custom error

    Raises:
        ConfigurationError: If a required variable is not set
    """
    if isinstance(config, str):
        if config.startswith("${") and config.endswith("}"):
            var_expr = config[2:-1]

            if ":-" in var_expr:
                var_name, default_value = var_expr.split(":-", 1)
                return os.environ.get(var_name, default_value)

            elif ":?" in var_expr:
                var_name, error_msg = var_expr.split(":?", 1)
                if var_name not in os.environ:
                    raise ConfigurationError(
                        f"Required environment variable: {error_msg}",
                        context={"variable": var_name},
                    )
                return os.environ[var_name]

            else:
                if var_expr not in os.environ:
                    raise ConfigurationError(
                        f"Environment variable not found: {var_expr}",
                        context={"variable": var_expr},
                    )
                return os.environ[var_expr]

        return config

    elif isinstance(config, dict):
        return {key: resolve_environment_vars(value) for key, value in config.items()}

    elif isinstance(config, list):
        return [resolve_environment_vars(item) for item in config]

    return config


def _load_file(file_path: Path) -> Dict[str, Any]:
    suffix = file_path.suffix.lower()

    try:
        with open(file_path) as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported config file format: {suffix}",
                    context={"path": str(file_path)},
                )
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read config file {file_path}: {e}",
            context={"path": str(file_path)},
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {file_path} must contain a mapping",
            context={"path": str(file_path)},
        )
    return data


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(data)
    for key in ("log_level", "output_format"):
        env_value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
        if env_value:
            result[key] = env_value
    color = os.environ.get(f"{ENV_PREFIX}COLOR")
    if color:
        result["color"] = _parse_bool(color)
    return result


def load_config(path: Union[str, Path, None] = None) -> CLIConfig:
    """Load CLI settings.

    Args:
        path: Optional YAML (.yaml/.yml) or JSON (.json) config file

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    data: Dict[str, Any] = {}
    if path is not None:
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                context={"path": str(file_path)},
            )
        data = resolve_environment_vars(_load_file(file_path))
        logger.debug(f"Loaded configuration from {file_path}")

    return CLIConfig.from_dict(_apply_env_overrides(data))


def configure_logging(level: str) -> None:
    """Set the root logging level and format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        force=True,
    )
