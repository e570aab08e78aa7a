"""Action dispatcher.

Each action becomes a writable cell whose read value is ACTION. Dispatching
it with ``runtime.set(store.increment, 5)``:

1. builds a writable StoreContext and calls the action with it and the
   dispatch arguments; assignments made through the context hit the root
   state immediately;
2. if the action returns a non-empty mapping, every entry naming a base key
   is folded into one root-state transition; other keys are ignored.

Nothing is rolled back when an action raises: writes made before the failure
stay applied and the exception propagates out of ``set``.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping

from atomic_store.core.cells import ACTION, Cell, Getter, Setter, WritableCell
from atomic_store.core.configuration import RuntimeConfig
from atomic_store.core.errors import UnknownKeyError

from .classifier import PropertyKind
from .receiver import StoreContext
from .root import RootState

logger = logging.getLogger(__name__)


class Patch(Mapping[str, Any]):
    """Immutable partial update of base state.

    Built through ``AtomicStore.patch(...)``, which checks every key against
    the base-key set up front. Returning a plain dict from an action is
    equally valid.
    """

    __slots__ = ("_values",)

    def __init__(self, base_keys: Iterable[str], values: Mapping[str, Any]) -> None:
        allowed = set(base_keys)
        unknown = [key for key in values if key not in allowed]
        if unknown:
            raise UnknownKeyError(unknown)
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Patch({dict(self._values)!r})"


def apply_patch(
    root: RootState,
    get: Getter,
    set: Setter,
    result: Any,
    warn_unknown: bool = False,
) -> None:
    """Fold an action's return value into root state.

    Anything but a non-empty mapping is ignored.
    """
    if not isinstance(result, Mapping) or not result:
        return

    updates = {key: value for key, value in result.items() if key in root}
    ignored = [key for key in result if key not in root]
    if ignored:
        message = f"Ignoring patch keys outside base state: {', '.join(map(str, ignored))}"
        if warn_unknown:
            logger.warning(message)
        else:
            logger.debug(message)

    root.write_many(get, set, updates)


def build_action_cell(
    key: str,
    action: Callable[..., Any],
    root: RootState,
    handles: Mapping[str, Cell],
    kinds: Mapping[str, PropertyKind],
    config: RuntimeConfig,
) -> WritableCell:
    """Build the write-only cell that dispatches ``action``."""

    def read(get: Getter) -> Any:
        return ACTION

    def write(get: Getter, set: Setter, *args: Any) -> None:
        logger.debug(f"Dispatching action '{key}' with {len(args)} argument(s)")

        def write_base(base_key: str, value: Any) -> None:
            root.write(get, set, base_key, value)

        context = StoreContext(handles, kinds, get, set, write_base)
        result = action(context, *args)
        apply_patch(root, get, set, result, warn_unknown=config.warn_on_unknown_patch_keys)

    return WritableCell(read, write, label=key)


def build_action_cells(
    actions: Mapping[str, Callable[..., Any]],
    root: RootState,
    handles: Mapping[str, Cell],
    kinds: Mapping[str, PropertyKind],
    config: RuntimeConfig,
) -> Dict[str, WritableCell]:
    return {
        key: build_action_cell(key, action, root, handles, kinds, config)
        for key, action in actions.items()
    }
