"""Cell runtime: values, dependency tracking and change notification.

The runtime owns the state of every cell it has touched. Derived cells are
computed lazily inside a tracking scope that records each dependency read
together with the version it had; on the next read the cell is reused as long
as all of those versions are unchanged, and recomputed otherwise.

Usage:
    runtime = CellRuntime()
    count = ValueCell(0, label="count")
    double = DerivedCell(lambda get: get(count) * 2, label="double")

    runtime.get(double)        # 0
    runtime.set(count, 21)
    runtime.get(double)        # 42
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from .cells import Cell, DerivedCell, ValueCell, WritableCell
from .change_bus import ChangeBus, Listener
from .configuration import RuntimeConfig, get_config
from .errors import CyclicDependencyError, NotWritableError

logger = logging.getLogger(__name__)


class _CellState:
    __slots__ = ("value", "version", "dependencies")

    def __init__(self, value: Any) -> None:
        self.value = value
        # Bumped only when the value actually changes
        self.version = 0
        self.dependencies: Dict[Cell, int] = {}


class CellRuntime:
    """Resolves, writes and observes cells.

    Single-threaded and synchronous: every get, set and listener call runs to
    completion before returning.
    """

    def __init__(self, config: Optional[RuntimeConfig] = None) -> None:
        self.config = config or get_config()
        self._states: Dict[Cell, _CellState] = {}
        self._computing: List[Cell] = []
        self._bus = ChangeBus()
        self._notified_versions: Dict[Cell, int] = {}
        self._write_depth = 0

    # --- Public API ---

    def get(self, cell: Cell) -> Any:
        """Return the current value of a cell, recomputing it if stale."""
        return self._read(cell).value

    def set(self, cell: Cell, *args: Any) -> Any:
        """Write a value cell or invoke a writable cell's write function.

        Listeners are notified once, after the outermost set() returns.

        Args:
            cell: Target cell
            *args: The new value for a value cell, or the write function's
                arguments for a writable cell

        Returns:
            Whatever the write function returned (None for value cells)

        Raises:
            NotWritableError: If the cell has no write function
        """
        self._write_depth += 1
        try:
            result = self._write(cell, args)
        finally:
            self._write_depth -= 1
        if self._write_depth == 0:
            self._flush()
        return result

    def subscribe(self, cell: Cell, listener: Listener) -> Callable[[], None]:
        """Call ``listener(value)`` whenever the cell's value changes.

        Returns:
            A function that removes the subscription
        """
        if not self._bus.has_listeners(cell):
            self._notified_versions[cell] = self._read(cell).version
        self._bus.subscribe(cell, listener)

        def unsubscribe() -> None:
            self._bus.unsubscribe(cell, listener)
            if not self._bus.has_listeners(cell):
                self._notified_versions.pop(cell, None)

        return unsubscribe

    # --- Reading ---

    def _read(self, cell: Cell) -> _CellState:
        state = self._states.get(cell)
        if isinstance(cell, ValueCell):
            if state is None:
                state = self._states[cell] = _CellState(cell.initial)
            return state

        if not isinstance(cell, DerivedCell):
            raise TypeError(f"Not a cell: {cell!r}")

        if cell in self._computing:
            start = self._computing.index(cell)
            raise CyclicDependencyError(self._computing[start:] + [cell])

        if state is not None and self._is_fresh(state):
            return state
        return self._compute(cell, state)

    def _is_fresh(self, state: _CellState) -> bool:
        for dependency, seen_version in state.dependencies.items():
            if self._read(dependency).version != seen_version:
                return False
        return True

    def _compute(self, cell: DerivedCell, state: Optional[_CellState]) -> _CellState:
        dependencies: Dict[Cell, int] = {}

        def tracked_get(dependency: Cell) -> Any:
            dependency_state = self._read(dependency)
            dependencies[dependency] = dependency_state.version
            return dependency_state.value

        self._computing.append(cell)
        try:
            value = cell.read(tracked_get)
        finally:
            self._computing.pop()

        if state is None:
            state = self._states[cell] = _CellState(value)
        else:
            # Always keep the fresh value; equal results leave dependents cached
            if not self._same(state.value, value):
                state.version += 1
            state.value = value
        state.dependencies = dependencies

        logger.debug(f"Computed {cell!r} (version {state.version}, {len(dependencies)} dependencies)")
        return state

    # --- Writing ---

    def _write(self, cell: Cell, args: Sequence[Any]) -> Any:
        if isinstance(cell, ValueCell):
            if len(args) != 1:
                raise TypeError(f"{cell!r} takes exactly one value, got {len(args)}")
            self._assign(cell, args[0])
            return None

        if isinstance(cell, WritableCell):
            return cell.write(self.get, self.set, *args)

        raise NotWritableError(f"{cell!r} is not writable")

    def _assign(self, cell: ValueCell, value: Any) -> None:
        state = self._read(cell)
        if state.value is value:
            return
        state.value = value
        state.version += 1
        logger.debug(f"Assigned {cell!r} (version {state.version})")

    def _same(self, current: Any, new: Any) -> bool:
        if current is new:
            return True
        if self.config.equality == "identity":
            return False
        try:
            return bool(current == new)
        except Exception:
            # Ambiguous comparisons (e.g. arrays) count as a change
            return False

    # --- Notification ---

    def _flush(self) -> None:
        for cell in self._bus.topics():
            if not self._bus.has_listeners(cell):
                continue
            state = self._read(cell)
            if state.version == self._notified_versions.get(cell):
                continue
            self._notified_versions[cell] = state.version
            self._bus.publish(cell, state.value)


# Global instance
_default_runtime: Optional[CellRuntime] = None


def get_default_runtime() -> CellRuntime:
    """Get the process-wide runtime, creating it on first use."""
    global _default_runtime
    if _default_runtime is None:
        _default_runtime = CellRuntime()
    return _default_runtime


def reset_default_runtime() -> None:
    """Drop the process-wide runtime.

    Primarily used for testing.
    """
    global _default_runtime
    _default_runtime = None
