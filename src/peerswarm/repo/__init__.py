"""Node configuration model and its on-disk store."""

from .config import NodeConfig, SwarmConfig
from .store import ConfigStore, FileConfigStore

__all__ = [
    "ConfigStore",
    "FileConfigStore",
    "NodeConfig",
    "SwarmConfig",
]
