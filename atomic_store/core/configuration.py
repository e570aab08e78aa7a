"""
Configuration Management for the atomic store runtime

Settings are merged with a 3-tier precedence hierarchy:
environment → project file → defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "atomic_store.yaml"
PACKAGE_LOGGER = "atomic_store"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class RuntimeConfig(BaseModel):
    """Cell runtime and store behaviour"""
    model_config = ConfigDict(extra='forbid')

    equality: Literal["identity", "equality"] = Field(
        default="equality",
        description="How a recomputed derived value is compared with the cached one",
    )
    warn_on_unknown_patch_keys: bool = Field(
        default=False,
        description="Log a warning when an action patch names non-base keys",
    )
    log_level: str = Field(default="WARNING", description="Level for the atomic_store loggers")


class ConfigManager:
    """Configuration manager with env → project → defaults precedence"""

    ENV_MAP = {
        'ATOMIC_STORE_EQUALITY': 'equality',
        'ATOMIC_STORE_WARN_UNKNOWN_PATCH_KEYS': 'warn_on_unknown_patch_keys',
        'ATOMIC_STORE_LOG_LEVEL': 'log_level',
    }

    def __init__(self, project_root: Optional[Path] = None, use_dotenv: bool = True):
        self.project_root = project_root or Path.cwd()
        self.config_path = self.project_root / PROJECT_CONFIG_FILE
        self._project_config: Optional[Dict[str, Any]] = None

        if use_dotenv:
            load_dotenv(self.project_root / ".env")

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

    def _load_project_config(self) -> Dict[str, Any]:
        """Load project-specific configuration"""
        if self._project_config is None:
            self._project_config = self._load_yaml_file(self.config_path)

        return self._project_config

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, config_key in self.ENV_MAP.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if config_key == 'warn_on_unknown_patch_keys':
                overrides[config_key] = value.lower() in ('true', '1', 'yes', 'on')
            elif config_key == 'log_level':
                overrides[config_key] = value.upper()
            else:
                overrides[config_key] = value.lower()

        return overrides

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → project → defaults"""
        merged = RuntimeConfig().model_dump()
        merged.update(self._load_project_config())
        merged.update(self._get_env_overrides())
        return merged

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> RuntimeConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return RuntimeConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}")
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return RuntimeConfig()

    def reload_config(self) -> None:
        """Clear cached configuration and reload from file"""
        self._project_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(project_root: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or project_root is not None:
        _config_manager = ConfigManager(project_root)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> RuntimeConfig:
    """Get current runtime configuration"""
    return get_config_manager().get_config(validation_level)


def configure_logging(config: Optional[RuntimeConfig] = None) -> None:
    """Apply the configured log level to the package loggers."""
    config = config or get_config()
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{config.log_level}', using WARNING")
        level = logging.WARNING
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
