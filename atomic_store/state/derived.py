"""Derived graph builder."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from atomic_store.core.cells import Cell, DerivedCell, Getter

from .classifier import PropertyKind
from .receiver import StoreContext

logger = logging.getLogger(__name__)


def build_derived_cell(
    key: str,
    getter: Callable[[Any], Any],
    handles: Mapping[str, Cell],
    kinds: Mapping[str, PropertyKind],
) -> DerivedCell:
    """Build a read-only cell that evaluates ``getter`` against the store.

    ``handles`` may still be incomplete here; it is only consulted when the
    cell is first read.
    """

    def read(get: Getter) -> Any:
        logger.debug(f"Evaluating derived '{key}'")
        return getter(StoreContext(handles, kinds, get))

    return DerivedCell(read, label=key)


def build_derived_cells(
    derived: Mapping[str, Callable[[Any], Any]],
    handles: Mapping[str, Cell],
    kinds: Mapping[str, PropertyKind],
) -> Dict[str, DerivedCell]:
    return {key: build_derived_cell(key, getter, handles, kinds) for key, getter in derived.items()}
