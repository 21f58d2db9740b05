"""
csmat Config - Storage and Validation Configuration

Provides property-based configuration for compressed sparse matrices.
Controls the dtypes used for freshly allocated buffers and how much
structural checking is done, without modifying function signatures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any, List
import os
import threading


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class StorageConfig:
    """Configuration for newly allocated buffers."""
    index_dtype: str = 'int64'     # dtype of indptr and indices
    value_dtype: str = 'float64'   # default dtype of stored values


@dataclass
class CheckConfig:
    """Configuration for structural validation."""
    check_structure: bool = True   # validate arrays in from_arrays / decode
    check_lines: bool = True       # validate lines in append_outer


def _checks_from_env() -> CheckConfig:
    disabled = os.environ.get('CSMAT_NO_CHECKS', '').lower() in ('1', 'true', 'yes')
    return CheckConfig(check_structure=not disabled, check_lines=not disabled)


# =============================================================================
# Global Configuration Manager
# =============================================================================

class CsmatConfig:
    """
    Global configuration manager for csmat.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        csmat.config.storage = StorageConfig(value_dtype='float32')

        # Local configuration (context manager)
        with csmat.config.local(check=CheckConfig(check_lines=False)):
            mat.append_outer(line)
        # Back to global config
    """

    def __init__(self):
        self._global_storage = StorageConfig()
        self._global_check = _checks_from_env()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def storage(self) -> StorageConfig:
        """Get storage configuration."""
        if getattr(self._local, "storage", None) is not None:
            return self._local.storage
        return self._global_storage

    @storage.setter
    def storage(self, value: StorageConfig):
        """Set global storage configuration."""
        self._global_storage = value

    @property
    def check(self) -> CheckConfig:
        """Get check configuration."""
        if getattr(self._local, "check", None) is not None:
            return self._local.check
        return self._global_check

    @check.setter
    def check(self, value: CheckConfig):
        """Set global check configuration."""
        self._global_check = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def index_dtype(self) -> str:
        return self.storage.index_dtype

    @property
    def value_dtype(self) -> str:
        return self.storage.value_dtype

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (storage, check)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - {"storage", "check"}
        if unknown:
            raise TypeError(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _clear_local(self, keys: List[str]):
        for key in keys:
            if hasattr(self._local, key):
                setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Reset / Serialization
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_storage = StorageConfig()
        self._global_check = _checks_from_env()

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "storage": {
                "index_dtype": self.storage.index_dtype,
                "value_dtype": self.storage.value_dtype,
            },
            "check": {
                "check_structure": self.check.check_structure,
                "check_lines": self.check.check_lines,
            },
        }

    def __repr__(self) -> str:
        return f"CsmatConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: CsmatConfig, **kwargs):
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

config = CsmatConfig()


def get_config() -> CsmatConfig:
    """Get the global configuration instance."""
    return config
