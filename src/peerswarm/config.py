"""
Global configuration for peerswarm.

This module contains environment-specific settings that apply across all packages.
"""

import os
from pathlib import Path

_DEFAULT_CONFIG_PATH = Path.home() / ".peerswarm" / "config.json"

SWARM_CONFIG_PATH = Path(os.environ.get("SWARM_CONFIG_PATH", _DEFAULT_CONFIG_PATH)).expanduser()
"""Node configuration file used by the CLI when `--config` is not given."""

if SWARM_CONFIG_PATH.exists() and SWARM_CONFIG_PATH.is_dir():
    raise ValueError(
        f"Invalid SWARM_CONFIG_PATH environment variable: '{SWARM_CONFIG_PATH}' is a directory"
    )
