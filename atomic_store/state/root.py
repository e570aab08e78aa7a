"""
Root state aggregation.

All base fields live in one composite cell holding a BaseStateRecord. Every
base key gets a writable handle projecting its entry out of that record, and
every write replaces the whole record, so a multi-key update is a single
transition for observers.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Tuple

from atomic_store.core.cells import Getter, Setter, ValueCell, WritableCell
from atomic_store.core.errors import UnknownKeyError

logger = logging.getLogger(__name__)


class BaseStateRecord(Mapping[str, Any]):
    """
    Immutable record of every base field.

    The key set is fixed at construction. Use replace() to derive a new
    record with some entries swapped.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"BaseStateRecord({dict(self._values)!r})"

    def replace(self, updates: Mapping[str, Any]) -> "BaseStateRecord":
        """
        Create a new record with updated entries.

        Args:
            updates: key -> new value, keys must already exist

        Returns:
            New record; this one is left untouched

        Raises:
            UnknownKeyError: If an update names a key outside the record
        """
        unknown = [key for key in updates if key not in self._values]
        if unknown:
            raise UnknownKeyError(unknown)
        values = dict(self._values)
        values.update(updates)
        return BaseStateRecord(values)


class RootState:
    """Composite cell for base state plus one handle per base key."""

    def __init__(self, initial: Mapping[str, Any]) -> None:
        self.keys: Tuple[str, ...] = tuple(initial)
        self.cell = ValueCell(BaseStateRecord(initial), label="<root>")
        self.handles: Dict[str, WritableCell] = {key: self._make_handle(key) for key in self.keys}

    def __contains__(self, key: object) -> bool:
        return key in self.handles

    def read(self, get: Getter, key: str) -> Any:
        """Project one base entry out of the composite record."""
        return get(self.cell)[key]

    def write(self, get: Getter, set: Setter, key: str, value: Any) -> None:
        """Replace one base entry."""
        self.write_many(get, set, {key: value})

    def write_many(self, get: Getter, set: Setter, updates: Mapping[str, Any]) -> None:
        """Replace several base entries in one composite-cell transition."""
        if not updates:
            return
        current = get(self.cell)
        set(self.cell, current.replace(updates))
        logger.debug(f"Root state updated: {', '.join(updates)}")

    def _make_handle(self, key: str) -> WritableCell:
        def read(get: Getter) -> Any:
            return self.read(get, key)

        def write(get: Getter, set: Setter, value: Any) -> None:
            self.write(get, set, key, value)

        return WritableCell(read, write, label=key)
