"""atomic-store package."""

from .core import (
    ACTION,
    AtomicStoreError,
    Cell,
    CellRuntime,
    CyclicDependencyError,
    DerivedCell,
    InvalidWriteError,
    NotWritableError,
    RuntimeConfig,
    UnknownKeyError,
    ValueCell,
    WritableCell,
    configure_logging,
    get_default_runtime,
    reset_default_runtime,
)
from .state import AtomicStore, Patch, PropertyKind, StoreContext, create_atomic_store

__version__ = "0.1.0"

__all__ = [
    "ACTION",
    "AtomicStore",
    "AtomicStoreError",
    "Cell",
    "CellRuntime",
    "CyclicDependencyError",
    "DerivedCell",
    "InvalidWriteError",
    "NotWritableError",
    "Patch",
    "PropertyKind",
    "RuntimeConfig",
    "StoreContext",
    "UnknownKeyError",
    "ValueCell",
    "WritableCell",
    "configure_logging",
    "create_atomic_store",
    "get_default_runtime",
    "reset_default_runtime",
]
