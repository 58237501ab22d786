# Marketsync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "remote": {
        "base_url": "https://marketplace.secondlife.com/api/1/",
        "import_url": "https://marketplace.secondlife.com/api/1/viewer/",
    },
    "importer": {
        "auto_trigger_import": False,
        "poll_interval": 1.0,
    },
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def default_config() -> dict[str, Any]:
    """Get a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """
    Generate the default configuration file content.

    Returns:
        YAML text with a short comment per section.
    """
    header = (
        "# marketsync configuration\n"
        "# Override the location with the MARKETSYNC_CONFIG environment variable.\n"
    )
    sections = {
        "remote": "# Marketplace service endpoints",
        "importer": "# Bulk inventory import job",
        "output": "# Console output",
    }

    parts = [header]
    for key, comment in sections.items():
        body = yaml.dump({key: DEFAULT_CONFIG[key]}, default_flow_style=False, sort_keys=False)
        parts.append(f"\n{comment}\n{body}")
    return "".join(parts)
