"""
Runtime Configuration

Central configuration for tree parameters and logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv

from imt.crypto.hashing import get_hash_function
from imt.merkle.tree import IncrementalMerkleTree
from imt.schemas.errors import ConfigurationError

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "IMT_"


def _env_int(name: str) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be an integer, got {raw!r}",
            parameter=name,
        ) from None


@dataclass
class TreeConfig:
    """Parameters of a tree built from configuration."""
    depth: int = 16
    arity: int = 2
    zero_value: int = 0
    hash_name: str = "sha256"

    def build_tree(self, leaves: Optional[Sequence[Any]] = None) -> IncrementalMerkleTree:
        """Construct a tree with these parameters."""
        return IncrementalMerkleTree(
            get_hash_function(self.hash_name),
            self.depth,
            self.zero_value,
            self.arity,
            leaves=list(leaves) if leaves is not None else None,
        )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - IMT_DEPTH: Tree depth
        - IMT_ARITY: Children per node
        - IMT_ZERO_VALUE: Empty-leaf value (decimal or 0x-prefixed)
        - IMT_HASH: Hash adapter name (sha256, blake2s)
        - IMT_LOG_LEVEL: Log level
        - IMT_LOG_FILE: Optional log file
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}DEPTH"):
            overrides.setdefault("tree", {})["depth"] = _env_int(f"{ENV_PREFIX}DEPTH")
        if os.getenv(f"{ENV_PREFIX}ARITY"):
            overrides.setdefault("tree", {})["arity"] = _env_int(f"{ENV_PREFIX}ARITY")
        if os.getenv(f"{ENV_PREFIX}ZERO_VALUE"):
            overrides.setdefault("tree", {})["zero_value"] = _env_int(f"{ENV_PREFIX}ZERO_VALUE")
        if os.getenv(f"{ENV_PREFIX}HASH"):
            overrides.setdefault("tree", {})["hash_name"] = os.getenv(f"{ENV_PREFIX}HASH")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the file is not valid YAML or not a mapping
        """
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in config file {path}: {e}",
                    parameter="config",
                ) from e

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}",
                parameter="config",
            )

        tree_data = data.get("tree", {}) or {}
        if not isinstance(tree_data, dict):
            raise ConfigurationError("'tree' section must be a mapping", parameter="tree")

        unknown = set(tree_data) - {"depth", "arity", "zero_value", "hash_name"}
        if unknown:
            raise ConfigurationError(
                f"Unknown tree settings: {', '.join(sorted(unknown))}",
                parameter="tree",
            )

        return cls(
            tree=TreeConfig(**tree_data),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "arity": self.tree.arity,
                "zero_value": self.tree.zero_value,
                "hash_name": self.tree.hash_name,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
