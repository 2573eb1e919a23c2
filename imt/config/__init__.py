"""
Runtime Configuration Module

Provides configuration loading for tree parameters and logging.
"""

from .runtime import (
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "get_default_config",
    "set_default_config",
]
