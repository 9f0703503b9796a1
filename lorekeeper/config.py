"""
Configuration management for Lorekeeper.

This module handles loading and accessing configuration values from config.yaml.
Every setting has a built-in default, so the library works without a file.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List
import logging


class ConfigManager:
    """
    Manages configuration loading and access for Lorekeeper.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Using default configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "paths": {
                "log_file": "lorekeeper.log",
                "entries_dir": "entries"
            },
            "importer": {
                "default": "mock",
                "file_extension": ".md",
                "terms_file": "terms.yaml"
            },
            "publish": {
                "author": "anonymous"
            },
            "lore": {
                "markdown_extensions": ["extra", "sane_lists", "tables"]
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "publish.author")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("importer.default")  # Returns "mock"
            config.get("lore.markdown_extensions")  # Returns ["extra", "sane_lists", "tables"]
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "lorekeeper.log")

    @property
    def entries_directory(self) -> str:
        """Get the directory the markdown importer reads entries from."""
        return self.get("paths.entries_dir", "entries")

    @property
    def default_importer(self) -> str:
        """Get the importer used when none is requested."""
        return self.get("importer.default", "mock")

    @property
    def entry_file_extension(self) -> str:
        """Get entry file extension."""
        return self.get("importer.file_extension", ".md")

    @property
    def terms_filename(self) -> str:
        """Get the name of the term directory file."""
        return self.get("importer.terms_file", "terms.yaml")

    @property
    def default_author(self) -> str:
        """Get the author recorded on published entries."""
        return self.get("publish.author", "anonymous")

    @property
    def markdown_extensions(self) -> List[str]:
        """Get the Python-Markdown extensions used for literal text."""
        return self.get("lore.markdown_extensions", ["extra", "sane_lists", "tables"])


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
