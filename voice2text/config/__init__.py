"""Simple YAML configuration loader for Voice2Text."""

import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "voice2text.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "google_cloud": {
        "use_enhanced_model": True,
        "enable_automatic_punctuation": True,
        "model": "latest_long",
        "unavailable_cooldown_seconds": 30,
    },
    "recognition": {
        "default_language": "english",
    },
    "audio": {
        "sample_rate": 16000,
        "chunk_size": 1024,
        "channels": 1,
    },
    "synthesis": {
        "rate": None,
        "volume": None,
        "voice_id": None,
    },
    "ocr": {
        "language": "eng",
        "tesseract_cmd": None,
    },
    "logging": {
        "level": "INFO",
        "file_path": "data/logs/voice2text.log",
        "console_output": False,
    },
}


def find_config_file(start_dir: Optional[str] = None) -> Optional[Path]:
    """Look for voice2text.yaml in start_dir and its parents."""
    directory = Path(start_dir or os.getcwd()).resolve()
    for candidate_dir in [directory, *directory.parents]:
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class Voice2TextConfig:
    """Voice2Text configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, looks for voice2text.yaml
                        in current directory and parent directories, and falls back
                        to built-in defaults when none is found.
        """
        if config_path is None:
            self.config_file = find_config_file()
        else:
            self.config_file = Path(config_path)
            if not self.config_file.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        if self.config_file is None:
            logger.info("No configuration file found, using built-in defaults")
            self.config = copy.deepcopy(DEFAULT_CONFIG)
        else:
            logger.info(f"Loading configuration from: {self.config_file}")
            self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}") from e

        if not loaded:
            raise ValueError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        config = copy.deepcopy(DEFAULT_CONFIG)
        _merge(config, loaded)

        # Resolve relative paths
        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        google = config.get('google_cloud') or {}
        creds_path = google.get('credentials_path')
        if creds_path and not os.path.isabs(creds_path):
            google['credentials_path'] = str(config_dir / creds_path)

        log_path = (config.get('logging') or {}).get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'google_cloud.model').

        Args:
            key_path: Dot-separated key path (e.g., 'audio.sample_rate')
            default: Default value if key not found or set to null

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return default if value is None else value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'recognition.default_language')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if not isinstance(config_dict.get(key), dict):
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_google_credentials_path(self) -> Optional[str]:
        """Get Google credentials path, or None when it is not configured."""
        creds_path = self.get('google_cloud.credentials_path')
        if not creds_path:
            return None
        return str(Path(creds_path).absolute())


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
