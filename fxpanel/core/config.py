"""
Configuration Management Module

Panel settings stored as JSON in the server profile folder. Values are
addressed with dot notation (``general.language``) and merged over
``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "general": {
        "language": "en",
    },
}


@dataclass
class ConfigManager:
    """
    Manages panel configuration with JSON storage.

    Features:
    - Load/save configuration from a JSON file
    - Default value fallback
    - Dot-notation access
    """

    config_dir: Path
    config_file: str = "config.json"
    _config: dict = field(default_factory=dict)
    _defaults: dict = field(default_factory=lambda: deepcopy(DEFAULT_CONFIG))
    _loaded: bool = False

    def __post_init__(self):
        self.config_dir = Path(self.config_dir)
        self._config = deepcopy(self._defaults)

    @property
    def config_path(self) -> Path:
        """Get the full path to the configuration file."""
        return self.config_dir / self.config_file

    def load(self) -> bool:
        """
        Load configuration from file.

        Returns:
            bool: True if loaded successfully, False if defaults were used
            because the file was unreadable.
        """
        try:
            if self.config_path.exists():
                with open(self.config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("configuration root is not an object")
                self._config = self._merge_config(self._defaults, loaded)
                logger.info(f"Configuration loaded from {self.config_path}")
            else:
                self._config = deepcopy(self._defaults)
                logger.info("Using default configuration")

            self._loaded = True
            return True

        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Invalid configuration file: {e}")
        except OSError as e:
            logger.error(f"Failed to load configuration: {e}")

        self._config = deepcopy(self._defaults)
        self._loaded = True
        return False

    def save(self) -> bool:
        """
        Save configuration to file.

        Returns:
            bool: True if saved successfully.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            return True
        except OSError as e:
            logger.error(f"Failed to save configuration to {self.config_path}: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "general.language")
            default: Default value if key not found
        """
        if not self._loaded:
            self.load()

        value = self._config
        try:
            for part in key.split("."):
                value = value[part]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "general.language")
            value: Value to set
            save: Whether to save immediately
        """
        if not self._loaded:
            self.load()

        parts = key.split(".")
        config = self._config
        for part in parts[:-1]:
            if part not in config:
                config[part] = {}
            config = config[part]
        config[parts[-1]] = value

        if save:
            self.save()

    def _merge_config(self, defaults: dict, loaded: dict) -> dict:
        """Recursively merge loaded config over defaults."""
        result = deepcopy(defaults)
        for key, value in loaded.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def get_all(self) -> dict:
        """Get the entire configuration dictionary."""
        if not self._loaded:
            self.load()
        return deepcopy(self._config)

    @classmethod
    def for_profile(cls, profile_root: str, load: bool = True) -> ConfigManager:
        """Configuration manager for a server profile folder."""
        manager = cls(config_dir=Path(profile_root))
        if load:
            manager.load()
        return manager

    def language(self, default: Optional[str] = None) -> str:
        """Selected panel language (``general.language``)."""
        return self.get("general.language", default or DEFAULT_CONFIG["general"]["language"])
