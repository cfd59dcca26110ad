# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
ConfStore Settings

Library-level settings (not the stores' own contents) supporting:
- Environment variables (CONFSTORE_*)
- Config files (~/.confstore/config.yaml, ./.confstore.yaml)
- Programmatic defaults
- Pydantic validation
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger("confstore.config")

VALID_HIVES = (
    "CLASSES_ROOT",
    "CURRENT_USER",
    "LOCAL_MACHINE",
    "USERS",
    "PERFORMANCE_DATA",
    "CURRENT_CONFIG",
)


# ============================================================================
# Configuration Models
# ============================================================================


class PathsConfig(BaseModel):
    """Path configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    log_dir: Path = Field(
        default_factory=lambda: Path.home() / ".confstore" / "logs",
        description="Log files directory",
    )

    @field_validator("*", mode="before")
    @classmethod
    def ensure_path(cls, v):
        """Convert strings to Path objects"""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class StoreConfig(BaseModel):
    """Store behaviour configuration"""

    profile_buffer_size: int = Field(
        default=32767,
        description="Max characters (including terminator) returned per profile value",
        ge=2,
    )
    default_hive: str = Field(
        default="CURRENT_USER", description="Registry hive used when none is given"
    )
    probe_prefix: str = Field(
        default="_test_", description="Name prefix of transient permission probes"
    )
    encoding: str = Field(default="utf-8", description="Profile file encoding")

    @field_validator("default_hive")
    @classmethod
    def validate_hive(cls, v):
        v_upper = v.upper()
        if v_upper.startswith("HKEY_"):
            v_upper = v_upper[len("HKEY_"):]
        if v_upper not in VALID_HIVES:
            raise ValueError(f"Invalid hive. Must be one of: {list(VALID_HIVES)}")
        return v_upper


class ObservabilityConfig(BaseModel):
    """Observability configuration"""

    log_level: str = Field(default="INFO", description="Logging level")
    file_logging: bool = Field(default=True, description="Write rotating log files")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper


class ConfStoreSettings(BaseModel):
    """Complete confstore configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


# ============================================================================
# Configuration Loader
# ============================================================================

_ENV_MAP = {
    "CONFSTORE_LOG_DIR": ("paths", "log_dir", str),
    "CONFSTORE_BUFFER_SIZE": ("store", "profile_buffer_size", int),
    "CONFSTORE_HIVE": ("store", "default_hive", str),
    "CONFSTORE_PROBE_PREFIX": ("store", "probe_prefix", str),
    "CONFSTORE_ENCODING": ("store", "encoding", str),
    "CONFSTORE_LOG_LEVEL": ("observability", "log_level", str),
}


class ConfigLoader:
    """Load configuration from multiple sources"""

    @staticmethod
    def load_from_env() -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}

        for env_name, (group, name, cast) in _ENV_MAP.items():
            raw = os.getenv(env_name)
            if raw:
                try:
                    config.setdefault(group, {})[name] = cast(raw)
                except ValueError:
                    logger.warning(f"Ignoring invalid {env_name}={raw!r}")

        no_file_logs = os.getenv("CONFSTORE_NO_FILE_LOGS")
        if no_file_logs:
            config.setdefault("observability", {})["file_logging"] = (
                no_file_logs.lower() != "true"
            )

        return config

    @staticmethod
    def load_from_file(file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config file {file_path}: {e}")
            return {}

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple configuration dictionaries"""
        result: Dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if (
                    key in result
                    and isinstance(result[key], dict)
                    and isinstance(value, dict)
                ):
                    result[key] = ConfigLoader.merge_configs(result[key], value)
                else:
                    result[key] = value
        return result


# ============================================================================
# Global Configuration Instance
# ============================================================================

_config: Optional[ConfStoreSettings] = None


def get_config() -> ConfStoreSettings:
    """
    Get global confstore configuration

    Configuration is loaded from (in order of precedence):
    1. Environment variables (CONFSTORE_*)
    2. .confstore.yaml in current directory
    3. ~/.confstore/config.yaml
    4. Default values
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def load_config(
    config_file: Optional[Path] = None, env_override: bool = True
) -> ConfStoreSettings:
    """
    Load configuration from all sources

    Args:
        config_file: Optional specific config file to load
        env_override: Whether environment variables override file config
    """
    configs = []

    default_locations = [
        Path.home() / ".confstore" / "config.yaml",
        Path.cwd() / ".confstore.yaml",
    ]

    for location in default_locations:
        file_config = ConfigLoader.load_from_file(location)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {location}")

    if config_file:
        file_config = ConfigLoader.load_from_file(config_file)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {config_file}")

    if env_override:
        env_config = ConfigLoader.load_from_env()
        if env_config:
            configs.append(env_config)
            logger.debug("Loaded config from environment")

    merged = ConfigLoader.merge_configs(*configs) if configs else {}

    try:
        return ConfStoreSettings(**merged)
    except (TypeError, ValueError) as e:
        logger.error(f"Config validation failed: {e}")
        logger.warning("Using default configuration")
        return ConfStoreSettings()


def reload_config() -> ConfStoreSettings:
    """Reload global configuration"""
    global _config
    _config = load_config()
    logger.info("Configuration reloaded")
    return _config
