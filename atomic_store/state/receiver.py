"""Synthetic receiver passed to derived getters and actions.

A StoreContext is created for one evaluation or one dispatch and dropped
afterwards. It is what getters and actions receive as ``self``:

    @property
    def total(self):
        return self.price * self["quantity"]

    def reset(self):
        self.count = 0
        self.set("label", "reset")

Keys named ``get`` or ``set`` are shadowed by the methods and can be reached
through item access.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Mapping, Optional

from atomic_store.core.cells import Cell, Getter, Setter
from atomic_store.core.errors import InvalidWriteError

from .classifier import PropertyKind


class StoreContext:
    """Per-evaluation view exposing every store key.

    Args:
        handles: key -> cell for the whole store
        kinds: key -> PropertyKind
        get: Getter supplied by the runtime (tracked inside derivations)
        set: Setter supplied by the runtime; None makes the context read-only
        write_base: Routes a base-key write to the root state
    """

    __slots__ = ("_handles", "_kinds", "_get", "_set", "_write_base")

    def __init__(
        self,
        handles: Mapping[str, Cell],
        kinds: Mapping[str, PropertyKind],
        get: Getter,
        set: Optional[Setter] = None,
        write_base: Optional[Callable[[str, Any], None]] = None,
    ) -> None:
        object.__setattr__(self, "_handles", handles)
        object.__setattr__(self, "_kinds", kinds)
        object.__setattr__(self, "_get", get)
        object.__setattr__(self, "_set", set)
        object.__setattr__(self, "_write_base", write_base)

    def get(self, key: str) -> Any:
        """Read a store key through its cell.

        Inside an action, an action key resolves to a function that
        dispatches that action.
        """
        cell = self._handles[key]
        if self._kinds[key] is PropertyKind.ACTION and self._set is not None:
            dispatch = self._set

            def dispatch_action(*args: Any) -> None:
                dispatch(cell, *args)

            dispatch_action.__name__ = key
            return dispatch_action
        return self._get(cell)

    def set(self, key: str, value: Any) -> None:
        """Write a base key immediately.

        Raises:
            InvalidWriteError: Outside an action, or for a derived, action or
                unknown key
        """
        kind = self._kinds.get(key)
        if self._set is None or self._write_base is None:
            raise InvalidWriteError(key, "store state is read-only during derivation")
        if kind is PropertyKind.DERIVED:
            raise InvalidWriteError(key, "derived state is read-only")
        if kind is PropertyKind.ACTION:
            raise InvalidWriteError(key, "actions cannot be assigned")
        if kind is None:
            raise InvalidWriteError(key, "not a store key")
        self._write_base(key, value)

    def __getattr__(self, name: str) -> Any:
        handles = object.__getattribute__(self, "_handles")
        if name.startswith("__") or name not in handles:
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delattr__(self, name: str) -> None:
        raise InvalidWriteError(name, "store keys cannot be deleted")

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._handles))

    def __repr__(self) -> str:
        mode = "derivation" if self._set is None else "action"
        return f"<StoreContext ({mode}) keys={list(self._handles)}>"

