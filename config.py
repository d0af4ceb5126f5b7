"""
Configuration Management for the Function Header Tool
=====================================================
Handles loading and validation of configuration settings for file discovery,
output placement, logging and write safety.

The header format itself is fixed and deliberately absent from the
configuration: downstream documentation tooling depends on it byte for byte.
"""

import json
import logging
import os
from typing import Dict, Any, Optional


class ConfigManager:
    """Configuration manager with dot-notation access and safety validation."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file, defaults to 'config.json'
        """
        self.config_file = config_file or 'config.json'
        self.logger = self._setup_logger()
        self.config = self._load_default_config()

        # Load user config if file exists
        if os.path.exists(self.config_file):
            self._load_config_file()
        else:
            self.logger.info(f"Config file {self.config_file} not found, using defaults")
            self._save_default_config()

    def _setup_logger(self) -> logging.Logger:
        """Setup logging for configuration operations."""
        logger = logging.getLogger('config')
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def _load_default_config(self) -> Dict[str, Any]:
        """
        Load default configuration.

        Returns:
            Dictionary containing default configuration
        """
        return {
            "processing": {
                "file_extensions": [".cpp", ".cc", ".cxx", ".c", ".h", ".hpp", ".inl"],
                "output_suffix": "_commented",
                "skip_patterns": ["_commented", "_backup", "Intermediate/", "Binaries/", ".git/"],
                "in_place": False,
                "create_backups": True
            },
            "logging": {
                "log_level": "INFO",
                "log_file": None
            },
            "safety": {
                "validate_before_save": True,  # Refuse writes that change code lines
                "backup_suffix": "_backup"
            }
        }

    def _load_config_file(self) -> None:
        """Load configuration from file and merge with defaults."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            # Recursively merge user config with defaults
            self.config = self._merge_configs(self.config, user_config)
            self.logger.info(f"Loaded configuration from {self.config_file}")

            self._validate_safety_settings()

        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in config file {self.config_file}: {e}")
            self.logger.info("Using default configuration")
        except OSError as e:
            self.logger.error(f"Error loading config file {self.config_file}: {e}")
            self.logger.info("Using default configuration")

    def _merge_configs(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively merge user configuration with defaults.

        Args:
            default: Default configuration dictionary
            user: User configuration dictionary

        Returns:
            Merged configuration dictionary
        """
        merged = default.copy()

        for key, value in user.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_configs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _validate_safety_settings(self) -> None:
        """Log warnings for disabled safety settings."""
        safety = self.config.get('safety', {})
        processing = self.config.get('processing', {})

        if safety.get('validate_before_save', True) is False:
            self.logger.warning("SAFETY WARNING: Pre-save code preservation check is DISABLED")

        if processing.get('in_place') and not processing.get('create_backups', True):
            self.logger.warning("SAFETY WARNING: In-place writes without backups")

    def _save_default_config(self) -> None:
        """Save the default configuration to file."""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Saved default configuration to {self.config_file}")
        except OSError as e:
            self.logger.error(f"Error saving default config to {self.config_file}: {e}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value (e.g., 'processing.in_place')
            default: Default value if key not found

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

        return value

    def set(self, key_path: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value
            value: Value to set
        """
        keys = key_path.split('.')
        target = self.config

        for key in keys[:-1]:
            if key not in target or not isinstance(target[key], dict):
                target[key] = {}
            target = target[key]

        target[keys[-1]] = value

    def save(self, file_path: Optional[str] = None) -> bool:
        """
        Save current configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        save_path = file_path or self.config_file

        try:
            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            self.logger.info(f"Configuration saved to {save_path}")
            return True
        except OSError as e:
            self.logger.error(f"Error saving configuration to {save_path}: {e}")
            return False

    def print_config_summary(self) -> None:
        """Print a summary of current configuration settings."""
        print("\n" + "="*60)
        print("FUNCTION HEADER TOOL CONFIGURATION")
        print("="*60)

        processing = self.config.get('processing', {})
        print(f"File Extensions: {processing.get('file_extensions', [])}")
        print(f"Skip Patterns: {processing.get('skip_patterns', [])}")
        print(f"Output Suffix: {processing.get('output_suffix', 'Not set')}")
        print(f"In-place Writes: {'YES' if processing.get('in_place') else 'NO'}")

        logging_config = self.config.get('logging', {})
        print(f"\nLog Level: {logging_config.get('log_level', 'INFO')}")
        print(f"Log File: {logging_config.get('log_file') or 'Console only'}")

        safety = self.config.get('safety', {})
        print(f"\n🛡️  SAFETY SETTINGS:")
        print(f"Code Preservation Check: {'✓ ENABLED' if safety.get('validate_before_save') else '✗ DISABLED'}")
        print(f"Backup Creation: {'✓ ENABLED' if processing.get('create_backups') else '✗ DISABLED'}")

        print("="*60)
