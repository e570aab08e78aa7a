"""
Atomic Store Core Module
========================

Reactive cells, the runtime that resolves them, configuration and errors.
"""

# Cells and runtime
from .cells import ACTION, Cell, DerivedCell, ValueCell, WritableCell
from .change_bus import ChangeBus
from .runtime import CellRuntime, get_default_runtime, reset_default_runtime

# Configuration
from .configuration import (
    ConfigManager,
    RuntimeConfig,
    ValidationLevel,
    configure_logging,
    get_config,
    get_config_manager,
)

# Errors
from .errors import (
    AtomicStoreError,
    CyclicDependencyError,
    InvalidWriteError,
    NotWritableError,
    UnknownKeyError,
)

__all__ = [
    # Cells and runtime
    "ACTION",
    "Cell",
    "DerivedCell",
    "ValueCell",
    "WritableCell",
    "ChangeBus",
    "CellRuntime",
    "get_default_runtime",
    "reset_default_runtime",
    # Configuration
    "ConfigManager",
    "RuntimeConfig",
    "ValidationLevel",
    "configure_logging",
    "get_config",
    "get_config_manager",
    # Errors
    "AtomicStoreError",
    "CyclicDependencyError",
    "InvalidWriteError",
    "NotWritableError",
    "UnknownKeyError",
]
