"""
Detective Configuration

Loads configuration from a YAML file and environment variables.
Only host-side settings live here (where mods are, optional class scan,
name mappings, logging). The rule set itself is fixed.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


# Configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".moddetective" / "config.yaml",
    Path("moddetective.yaml"),
]


DEFAULT_CONFIG = {
    "mods_dir": "mods",
    "metadata_filename": "fabric.mod.json",

    # Optional class collision scan
    "class_scan": False,
    "collision_attribution": "class",    # "class" or "package"

    # Host type id -> class name
    "mappings": {
        "net.minecraft.class_1703": "net.minecraft.screen.ScreenHandler",
    },

    "log_level": "INFO",
}

ENV_MAPPINGS = {
    "MODDETECTIVE_MODS_DIR": "mods_dir",
    "MODDETECTIVE_LOG_LEVEL": "log_level",
    "MODDETECTIVE_CLASS_SCAN": "class_scan",
}

BOOL_KEYS = {"class_scan"}
TRUTHY = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


class DetectiveConfig:
    """Configuration for a detective run."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config["mappings"] = dict(DEFAULT_CONFIG["mappings"])
        self._config_path: Optional[Path] = None

        # Load from file if found
        self._load_config(config_path)

        # Override with environment variables
        self._apply_env_overrides()

        self._validate()

    def _load_config(self, explicit_path: Optional[Path] = None) -> None:
        """Load configuration from YAML file."""
        search_paths = [Path(explicit_path)] if explicit_path else CONFIG_SEARCH_PATHS

        for config_path in search_paths:
            if config_path and config_path.exists():
                try:
                    with open(config_path, 'r', encoding='utf-8') as f:
                        user_config = yaml.safe_load(f) or {}
                    if not isinstance(user_config, dict):
                        raise ConfigError(f"Top level of {config_path} must be a mapping")
                except (OSError, yaml.YAMLError, ConfigError) as e:
                    logger.warning(f"Failed to load config from {config_path}: {e}")
                    continue

                mappings = user_config.pop("mappings", None) or {}
                if not isinstance(mappings, dict):
                    raise ConfigError("mappings must be a mapping of type id to class name")
                self._config.update(user_config)
                self._config["mappings"].update(mappings)
                self._config_path = config_path
                return

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        for env_var, config_key in ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value:
                self._config[config_key] = value

    def _validate(self) -> None:
        for key in BOOL_KEYS:
            self._config[key] = _as_bool(self._config.get(key))

        attribution = self._config.get("collision_attribution")
        if attribution not in ("class", "package"):
            raise ConfigError(
                f"collision_attribution must be 'class' or 'package', got {attribution!r}"
            )

        if not isinstance(self._config.get("mappings"), dict):
            raise ConfigError("mappings must be a mapping of type id to class name")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Override a configuration value (used for CLI flags)."""
        self._config[key] = value
        self._validate()

    @property
    def config_path(self) -> Optional[Path]:
        """Path of the loaded config file, if any."""
        return self._config_path

    @property
    def mods_dir(self) -> Path:
        return Path(self._config["mods_dir"]).expanduser()

    @property
    def metadata_filename(self) -> str:
        return self._config["metadata_filename"]

    @property
    def class_scan(self) -> bool:
        return self._config["class_scan"]

    @property
    def collision_attribution(self) -> str:
        return self._config["collision_attribution"]

    @property
    def mappings(self) -> Dict[str, str]:
        return dict(self._config["mappings"])

    @property
    def log_level(self) -> str:
        return str(self._config["log_level"]).upper()

    def to_dict(self) -> Dict[str, Any]:
        """Return the effective configuration."""
        return dict(self._config)
