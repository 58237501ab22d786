# Marketsync Configuration Loader
# Load, save, and manage YAML configuration files

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from marketsync.config.defaults import default_config, generate_default_config
from marketsync.config.schema import MarketsyncConfig

CONFIG_ENV_VAR = "MARKETSYNC_CONFIG"


def get_config_dir() -> Path:
    """Get the marketsync configuration directory."""
    return Path.home() / ".config" / "marketsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> MarketsyncConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        MarketsyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\nRun 'marketsync config init' to create one."
        )

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    return MarketsyncConfig.model_validate(_merge_with_defaults(data))


def save_config(config: MarketsyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(exclude_none=True, mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Args:
        config_path: Optional path to config file.
        force: Overwrite an existing file with the defaults.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def load_or_default(config_path: Optional[Path] = None) -> MarketsyncConfig:
    """Load config if the file exists, otherwise return the defaults."""
    if config_path is None:
        config_path = get_config_path()
    if not config_path.exists():
        return MarketsyncConfig()
    return load_config(config_path)


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    errors: list[str] = []
    unknown = sorted(set(data) - set(MarketsyncConfig.model_fields))
    for key in unknown:
        errors.append(f"Unknown section '{key}'")

    try:
        MarketsyncConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

    return len(errors) == 0, errors


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = default_config()

    for section in ("remote", "importer", "output"):
        if isinstance(data.get(section), dict):
            result[section] = {**result[section], **data[section]}

    return result
