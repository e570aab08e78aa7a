"""Atomic Store assembly.

Turns one state description into a mapping of independently addressable
cells.

Usage:
    class Counter:
        count = 0

        @property
        def double(self):
            return self.count * 2

        def increment(self, n=1):
            return {"count": self.count + n}

    store = create_atomic_store(Counter)
    runtime = CellRuntime()

    runtime.get(store.count)          # 0
    runtime.set(store.increment, 5)
    runtime.get(store.double)         # 10
    runtime.set(store.count, 1)
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from atomic_store.core.cells import Cell
from atomic_store.core.configuration import RuntimeConfig, get_config

from .actions import Patch, build_action_cells
from .classifier import Classification, PropertyKind, classify
from .derived import build_derived_cells
from .root import RootState

logger = logging.getLogger(__name__)


class AtomicStore(Mapping[str, Cell]):
    """Immutable mapping of key -> cell handle, one handle per description key.

    Handles are also reachable as attributes (``store.count``). Base handles
    are writable cells, derived handles read-only cells and action handles
    writable cells whose read value is ACTION.
    """

    __slots__ = ("_handles", "_kinds", "_root")

    def __init__(
        self,
        handles: Mapping[str, Cell],
        kinds: Mapping[str, PropertyKind],
        root: RootState,
    ) -> None:
        object.__setattr__(self, "_handles", MappingProxyType(dict(handles)))
        object.__setattr__(self, "_kinds", MappingProxyType(dict(kinds)))
        object.__setattr__(self, "_root", root)

    def __getitem__(self, key: str) -> Cell:
        return self._handles[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __getattr__(self, name: str) -> Cell:
        handles = object.__getattribute__(self, "_handles")
        try:
            return handles[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("AtomicStore is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("AtomicStore is immutable")

    def __repr__(self) -> str:
        entries = ", ".join(f"{key}={kind.value}" for key, kind in self._kinds.items())
        return f"AtomicStore({entries})"

    # --- Introspection ---

    def kind_of(self, key: str) -> PropertyKind:
        return self._kinds[key]

    @property
    def base_keys(self) -> Tuple[str, ...]:
        return self._root.keys

    @property
    def derived_keys(self) -> Tuple[str, ...]:
        return tuple(k for k, kind in self._kinds.items() if kind is PropertyKind.DERIVED)

    @property
    def action_keys(self) -> Tuple[str, ...]:
        return tuple(k for k, kind in self._kinds.items() if kind is PropertyKind.ACTION)

    @property
    def root(self) -> Cell:
        """The composite cell holding every base field."""
        return self._root.cell

    def patch(self, **values: Any) -> Patch:
        """Build a patch for an action to return, checking keys up front.

        Raises:
            UnknownKeyError: If a key is not base state
        """
        return Patch(self._root.keys, values)


def create_atomic_store(
    definition: Union[type, Mapping[str, Any]],
    config: Optional[RuntimeConfig] = None,
) -> AtomicStore:
    """Create an atomic store from a state description.

    The description's entries become:

    - plain values: base state, stored together in one root cell and exposed
      as writable per-key handles;
    - properties: derived state, read-only cells recomputed only when
      something they read changes;
    - other callables: actions, dispatched with ``runtime.set(handle, *args)``.
      An action may assign base keys on ``self`` and may return a mapping
      of base keys to new values, applied as a single update.

    Args:
        definition: A class or a mapping describing the state
        config: Runtime configuration; loaded with get_config() when omitted

    Returns:
        The store, one handle per description key
    """
    config = config or get_config()
    classification: Classification = classify(definition)
    kinds = classification.kinds

    root = RootState(classification.base)

    # Receivers resolve keys through this dict lazily, so it only has to be
    # complete before the first read, not while cells are being built.
    handles: Dict[str, Cell] = {}
    derived = build_derived_cells(classification.derived, handles, kinds)
    actions = build_action_cells(classification.actions, root, handles, kinds, config)

    for key, kind in kinds.items():
        if kind is PropertyKind.BASE:
            handles[key] = root.handles[key]
        elif kind is PropertyKind.DERIVED:
            handles[key] = derived[key]
        else:
            handles[key] = actions[key]

    shadowed = [key for key in kinds if hasattr(AtomicStore, key)]
    if shadowed:
        logger.warning(
            f"Store keys shadowed by AtomicStore attributes, use store[key] for: {', '.join(shadowed)}"
        )

    logger.debug(
        f"Created atomic store with {len(root.keys)} base, {len(derived)} derived "
        f"and {len(actions)} action key(s)"
    )
    return AtomicStore(handles, kinds, root)
