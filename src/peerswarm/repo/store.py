"""
Configuration persistence.

The swarm only ever performs read-modify-write cycles on the configuration,
addressed by path. Writes replace the file atomically: a crash leaves either
the old or the new configuration, never a truncated one.

The file format follows the suffix: `.yaml` / `.yml` files are YAML, anything
else is JSON.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import yaml

from peerswarm.types import PersistenceError

from .config import NodeConfig

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class ConfigStore(Protocol):
    """Key-value store of node configurations, keyed by path."""

    def read(self, path: Path) -> NodeConfig:
        """Load the configuration at `path`."""
        ...

    def write(self, path: Path, config: NodeConfig) -> None:
        """Persist `config` at `path`, raising `PersistenceError` on failure."""
        ...


class FileConfigStore:
    """Stores each configuration as a JSON or YAML file."""

    def read(self, path: Path) -> NodeConfig:
        """
        Load the configuration at `path`.

        A missing file yields the default configuration.

        Raises:
            PersistenceError: If the file cannot be read or does not validate.
        """
        path = Path(path)
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            return NodeConfig()

        try:
            text = path.read_text(encoding="utf-8")
            data = _load(path, text)
            return NodeConfig.model_validate(data or {})
        except (OSError, ValueError, yaml.YAMLError) as e:
            # ValidationError and JSONDecodeError are ValueErrors.
            raise PersistenceError(path, "read", str(e)) from e

    def write(self, path: Path, config: NodeConfig) -> None:
        """
        Persist `config` at `path` atomically.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        path = Path(path)
        text = _dump(path, config.model_dump(by_alias=True, mode="json"))

        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(path, "write", str(e)) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug("Wrote config %s", path)


def _load(path: Path, text: str) -> Any:
    if path.suffix in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text) if text.strip() else {}


def _dump(path: Path, data: dict[str, Any]) -> str:
    if path.suffix in _YAML_SUFFIXES:
        return yaml.safe_dump(data, sort_keys=False)
    return json.dumps(data, indent=2) + "\n"
