# Marketsync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from marketsync.config.defaults import DEFAULT_CONFIG, default_config, generate_default_config
from marketsync.config.loader import (
    CONFIG_ENV_VAR,
    ensure_config_exists,
    get_config_path,
    load_config,
    load_or_default,
    save_config,
    validate_config_file,
)
from marketsync.config.schema import (
    ImporterConfig,
    MarketsyncConfig,
    OutputConfig,
    RemoteConfig,
)

__all__ = [
    # Schema
    "MarketsyncConfig",
    "RemoteConfig",
    "ImporterConfig",
    "OutputConfig",
    # Loader
    "CONFIG_ENV_VAR",
    "load_config",
    "load_or_default",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "default_config",
    "generate_default_config",
]
