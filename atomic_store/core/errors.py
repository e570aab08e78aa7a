"""
Exception types for the atomic store and its cell runtime.
"""

from __future__ import annotations

from typing import Any, Sequence


class AtomicStoreError(Exception):
    """Base class for all atomic store errors."""
    pass


class InvalidWriteError(AtomicStoreError):
    """Raised when a receiver write targets anything other than base state."""

    def __init__(self, key: str, reason: str = "only base state can be assigned") -> None:
        self.key = key
        super().__init__(f"Cannot set '{key}': {reason}")


class NotWritableError(AtomicStoreError):
    """Raised when set() is called on a cell that has no write function."""
    pass


class CyclicDependencyError(AtomicStoreError):
    """Raised when a derived cell (transitively) reads itself."""

    def __init__(self, cycle: Sequence[Any]) -> None:
        self.cycle = list(cycle)
        path = " -> ".join(repr(cell) for cell in self.cycle)
        super().__init__(f"Cyclic dependency detected: {path}")


class UnknownKeyError(AtomicStoreError, KeyError):
    """Raised when a patch or record update names a key outside the base-key set."""

    def __init__(self, keys: Sequence[str]) -> None:
        self.keys = list(keys)
        super().__init__(f"Not base state keys: {', '.join(self.keys)}")

    def __str__(self) -> str:
        return self.args[0]
