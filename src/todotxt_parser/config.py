"""Configuration for the todotxt command-line filter.

The parsing core takes no configuration; these settings only shape how
the CLI prints results.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TODOTXT_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/todotxt-parser/config.yaml")

OUTPUT_FORMATS = ("table", "todotxt", "json", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ConfigModel:
    """Global configuration model for the todotxt CLI."""

    # Display preferences
    output_format: str = "table"
    show_completed: bool = True
    no_color: bool = False

    log_level: str = "WARNING"

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            logger.warning(
                "Unknown output_format %r, using 'table'", self.output_format
            )
            self.output_format = "table"
        level = str(self.log_level).upper()
        if level not in LOG_LEVELS:
            logger.warning("Unknown log_level %r, using 'WARNING'", self.log_level)
            level = "WARNING"
        self.log_level = level

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.safe_dump(asdict(self), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            logger.warning("Config root must be a mapping, got %s", type(data).__name__)
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(map(str, unknown)))
        return cls(**{key: value for key, value in data.items() if key in known})


def get_config_path(config_path: Optional[Path] = None) -> Path:
    """Resolve the config file path.

    Precedence: explicit argument, then ``$TODOTXT_CONFIG``, then the
    per-user default.
    """
    if config_path is not None:
        return Path(config_path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file or fall back to defaults.

    A missing file is not an error and no file is created. Unreadable or
    malformed files are reported as warnings.
    """
    path = get_config_path(config_path)
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return ConfigModel()

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = ConfigModel.from_yaml(f.read())
    except (OSError, UnicodeDecodeError, yaml.YAMLError, TypeError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return ConfigModel()

    logger.debug("Loaded configuration from %s", path)
    return config
