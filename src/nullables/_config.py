"""
Nullables Config - Strategy Configuration System

Provides property-based strategy configuration for copy and conversion.
Allows fine-grained control over computation behavior without modifying
function signatures.

Defaults can be set from the environment:
    NULLABLES_COPY_STRATEGY   'auto' (default) or 'masked'
    NULLABLES_CASTING         numpy casting rule (default 'unsafe')
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List

logger = logging.getLogger("nullables.config")


_CASTING_RULES = ("no", "equiv", "safe", "same_kind", "unsafe")


# =============================================================================
# Strategy Enumerations
# =============================================================================

class CopyStrategy(IntEnum):
    """
    Strategy for copying values between nullable arrays.
    """
    AUTO = 0           # Bulk copy when both element types are plain bits
    MASKED = 1         # Always copy only the valid positions


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class CopyConfig:
    """Configuration for copyto()."""
    strategy: CopyStrategy = CopyStrategy.AUTO


@dataclass
class ConvertConfig:
    """Configuration for element type conversion."""
    casting: str = "unsafe"        # Passed to ndarray.astype

    def __post_init__(self):
        if self.casting not in _CASTING_RULES:
            raise ValueError(
                f"Invalid casting rule: {self.casting!r}. Valid: {_CASTING_RULES}"
            )


def _copy_config_from_env() -> CopyConfig:
    raw = os.environ.get("NULLABLES_COPY_STRATEGY", "").strip().upper()
    if not raw:
        return CopyConfig()
    try:
        return CopyConfig(strategy=CopyStrategy[raw])
    except KeyError:
        logger.warning(f"Ignoring NULLABLES_COPY_STRATEGY={raw.lower()!r}: "
                       f"expected one of {[s.name.lower() for s in CopyStrategy]}")
        return CopyConfig()


def _convert_config_from_env() -> ConvertConfig:
    raw = os.environ.get("NULLABLES_CASTING", "").strip().lower()
    if not raw:
        return ConvertConfig()
    try:
        return ConvertConfig(casting=raw)
    except ValueError as e:
        logger.warning(f"Ignoring NULLABLES_CASTING: {e}")
        return ConvertConfig()


# =============================================================================
# Global Configuration Manager
# =============================================================================

class NullablesConfig:
    """
    Global configuration manager for nullables.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        nullables.config.copy = CopyConfig(strategy=CopyStrategy.MASKED)

        # Local configuration (context manager)
        with nullables.config.local(convert=ConvertConfig(casting="safe")):
            plain = nullables.to_array(X, "int32")
        # Back to global config
    """

    def __init__(self):
        self._global_copy = _copy_config_from_env()
        self._global_convert = _convert_config_from_env()

        # Thread-local storage for context overrides
        self._local = threading.local()

        self._callbacks: Dict[str, List[Callable]] = {
            "copy": [],
            "convert": [],
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def copy(self) -> CopyConfig:
        """Get copy configuration."""
        if getattr(self._local, "copy", None) is not None:
            return self._local.copy
        return self._global_copy

    @copy.setter
    def copy(self, value: CopyConfig):
        """Set global copy configuration."""
        self._global_copy = value
        self._notify("copy", value)

    @property
    def convert(self) -> ConvertConfig:
        """Get conversion configuration."""
        if getattr(self._local, "convert", None) is not None:
            return self._local.convert
        return self._global_convert

    @convert.setter
    def convert(self, value: ConvertConfig):
        """Set global conversion configuration."""
        self._global_convert = value
        self._notify("convert", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def copy_strategy(self) -> CopyStrategy:
        """Strategy used by copyto()."""
        return self.copy.strategy

    @property
    def casting(self) -> str:
        """Casting rule used for element conversion."""
        return self.convert.casting

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (copy, convert)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._callbacks)
        if unknown:
            raise TypeError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        """Clear thread-local configuration."""
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config ("copy" or "convert")
            callback: Function to call when config changes
        """
        if config_name in self._callbacks:
            self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        for callback in self._callbacks.get(config_name, []):
            try:
                callback(value)
            except Exception as e:
                logger.warning(f"Config callback for '{config_name}' failed: {e}")

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults (ignores the environment)."""
        self._global_copy = CopyConfig()
        self._global_convert = ConvertConfig()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "copy": {
                "strategy": self.copy.strategy.name,
            },
            "convert": {
                "casting": self.convert.casting,
            },
        }

    def __repr__(self) -> str:
        return f"NullablesConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: NullablesConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())

    def __enter__(self):
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._clear_local(self._keys)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = NullablesConfig()


def get_config() -> NullablesConfig:
    """Get the global configuration instance."""
    return config


def set_copy_strategy(strategy: CopyStrategy = CopyStrategy.AUTO):
    """Set the global copy strategy."""
    config.copy = CopyConfig(strategy=CopyStrategy(strategy))


def set_casting(casting: str = "unsafe"):
    """Set the global numpy casting rule for element conversion."""
    config.convert = ConvertConfig(casting=casting)


__all__ = [
    "CopyStrategy",
    "CopyConfig",
    "ConvertConfig",
    "NullablesConfig",
    "config",
    "get_config",
    "set_copy_strategy",
    "set_casting",
]
