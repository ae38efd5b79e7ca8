"""
Configuration Management Module for the Descriptor Wallet CLI

Handles hierarchical configuration loading (defaults, profile, config file,
environment variables), dot-path access and validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from descriptors.exceptions import VariantsParseError
from descriptors.variants import Variants

# Environment variable prefix
ENV_PREFIX = 'DW_'

CONFIG_FILE_NAMES = ('.descriptor-wallet.yml', '.descriptor-wallet.yaml', '.descriptor-wallet.json')

NETWORKS = ('bitcoin', 'testnet', 'regtest', 'signet')
OUTPUT_FORMATS = ('table', 'json', 'yaml')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Default configuration values
DEFAULT_CONFIG = {
    'network': {
        'type': 'bitcoin',  # bitcoin, testnet, regtest, signet
    },
    'cli': {
        'output_format': 'table',  # table, json, yaml
        'verbose': 0,
        'log_level': 'WARNING',
    },
    'generator': {
        'default_variants': 'BHNS',
        'default_count': 1,
        'start_index': 0,
    },
}

# Configuration profiles
PROFILES = {
    'mainnet': {
        'network': {'type': 'bitcoin'},
        'cli': {'verbose': 0},
    },
    'testnet': {
        'network': {'type': 'testnet'},
        'cli': {'verbose': 1},
    },
    'development': {
        'network': {'type': 'regtest'},
        'cli': {'verbose': 2, 'log_level': 'DEBUG'},
        'generator': {'default_count': 5},
    },
}


class ConfigurationError(Exception):
    """Raised when a configuration source can't be loaded."""
    pass


def config_search_paths() -> List[Path]:
    """Configuration file locations in order of precedence (highest first)."""
    paths = [Path.cwd() / name for name in CONFIG_FILE_NAMES]
    paths += [Path.home() / '.descriptor-wallet' / 'config.yml',
              Path.home() / '.descriptor-wallet' / 'config.json']
    return paths


class ConfigurationManager:
    """Manages hierarchical configuration with environment variable support."""

    def __init__(self, config_file: Optional[str] = None, profile: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Explicit configuration file path
            profile: Configuration profile to load (mainnet, testnet, development)
            environ: Environment mapping, os.environ by default
        """
        self.logger = logging.getLogger(__name__)
        self.config_file = config_file
        self.profile = profile
        self.environ = os.environ if environ is None else environ
        self._config_cache: Optional[Dict[str, Any]] = None
        self._config_sources: List[str] = []

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from all sources in hierarchical order.

        Returns:
            Merged configuration dictionary

        Raises:
            ConfigurationError: for unknown profiles and unreadable files
        """
        if self._config_cache is not None:
            return self._config_cache

        configs = [DEFAULT_CONFIG]
        self._config_sources = ["defaults"]

        if self.profile:
            if self.profile not in PROFILES:
                raise ConfigurationError(f"Unknown configuration profile: {self.profile}")
            configs.append(PROFILES[self.profile])
            self._config_sources.append(f"profile:{self.profile}")
            self.logger.debug("Applied profile: %s", self.profile)

        if self.config_file:
            path = Path(self.config_file)
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}")
            configs.append(self._load_config_file(path))
            self._config_sources.append(f"file:{path}")
        else:
            for config_path in config_search_paths():
                if config_path.exists():
                    configs.append(self._load_config_file(config_path))
                    self._config_sources.append(f"file:{config_path}")
                    self.logger.debug("Loaded config from %s", config_path)
                    break  # Use first found config file

        env_config = self._load_environment_variables()
        if env_config:
            configs.append(env_config)
            self._config_sources.append("environment")

        self._config_cache = self._deep_merge(*configs)
        return self._config_cache

    def _load_config_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML or JSON file."""
        try:
            with open(path, 'r') as f:
                if path.suffix in ('.yml', '.yaml'):
                    data = yaml.safe_load(f)
                elif path.suffix == '.json':
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unknown config file format: {path}")
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return data

    def _load_environment_variables(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        DW_CLI_OUTPUT_FORMAT maps to {'cli': {'output_format': ...}}; the name
        is split against the known configuration keys so that keys containing
        underscores stay intact.
        """
        env_config: Dict[str, Any] = {}

        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            parts = key[len(ENV_PREFIX):].lower().split('_')
            path = self._resolve_env_path(parts)

            current = env_config
            for part in path[:-1]:
                current = current.setdefault(part, {})
            current[path[-1]] = self._parse_env_value(value)

        return env_config

    @staticmethod
    def _resolve_env_path(parts: List[str]) -> List[str]:
        path = []
        known: Any = DEFAULT_CONFIG
        i = 0
        while i < len(parts):
            for j in range(len(parts), i, -1):
                candidate = '_'.join(parts[i:j])
                if isinstance(known, dict) and candidate in known:
                    path.append(candidate)
                    known = known[candidate]
                    i = j
                    break
            else:
                path.append(parts[i])
                known = None
                i += 1
        return path

    @staticmethod
    def _parse_env_value(value: str) -> Union[str, int, float, bool]:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ('true', 'yes'):
            return True
        if value.lower() in ('false', 'no'):
            return False

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def _deep_merge(self, *dicts: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple dictionaries."""
        result: Dict[str, Any] = {}

        for dictionary in dicts:
            for key, value in dictionary.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = self._deep_merge(result[key], value)
                elif isinstance(value, dict):
                    result[key] = self._deep_merge(value)
                else:
                    result[key] = value

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'network.type')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        current: Any = self.load()

        for key in key_path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key_path: str, value: Any):
        """Set configuration value by dot-notation path."""
        config = self.load()

        keys = key_path.split('.')
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})

        current[keys[-1]] = value

    def save(self, path: Optional[str] = None, format: str = 'yaml'):
        """
        Save current configuration to file.

        Args:
            path: File path to save to (default: project config file)
            format: Output format ('yaml' or 'json')
        """
        config = self.load()

        if not path:
            path = Path.cwd() / ('.descriptor-wallet.yml' if format == 'yaml' else '.descriptor-wallet.json')

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            if format == 'yaml':
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config, f, indent=2)

        self.logger.info("Configuration saved to %s", path)

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        network_type = self.get('network.type')
        if network_type not in NETWORKS:
            errors.append(f"Invalid network type: {network_type}")

        output_format = self.get('cli.output_format')
        if output_format not in OUTPUT_FORMATS:
            errors.append(f"Invalid output format: {output_format}")

        log_level = self.get('cli.log_level')
        if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {log_level}")

        verbose = self.get('cli.verbose')
        if isinstance(verbose, bool) or not isinstance(verbose, int) or verbose < 0:
            errors.append("Verbosity must be a non-negative integer")

        count = self.get('generator.default_count')
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            errors.append("Generator default count must be a positive integer")

        start_index = self.get('generator.start_index')
        if isinstance(start_index, bool) or not isinstance(start_index, int) or start_index < 0:
            errors.append("Generator start index must be a non-negative integer")

        try:
            Variants.parse(str(self.get('generator.default_variants', '')))
        except VariantsParseError as e:
            errors.append(f"Invalid default variants: {e}")

        return errors

    def get_sources(self) -> List[str]:
        """Get list of configuration sources that were loaded."""
        self.load()
        return self._config_sources

    def reset(self):
        """Reset configuration cache."""
        self._config_cache = None
        self._config_sources = []
