"""Cell definitions for the reactive runtime.

A cell is only a description: it holds an initial value or the functions
that read and write it. Values, versions and dependencies live in a
CellRuntime, so one cell can be used with any number of runtimes.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeAlias

Getter: TypeAlias = Callable[["Cell"], Any]
Setter: TypeAlias = Callable[..., Any]
ReadFn: TypeAlias = Callable[[Getter], Any]
WriteFn: TypeAlias = Callable[..., Any]


class _ActionSentinel:
    """Read value of action cells."""

    _instance: Optional["_ActionSentinel"] = None

    def __new__(cls) -> "_ActionSentinel":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ACTION"


ACTION = _ActionSentinel()


class Cell:
    """Base class for every reactive unit.

    Cells compare and hash by identity, which is what the runtime keys its
    state on.
    """

    writable = False

    def __init__(self, label: Optional[str] = None) -> None:
        self.label = label

    def __repr__(self) -> str:
        name = type(self).__name__
        if self.label:
            return f"<{name} {self.label}>"
        return f"<{name} at {id(self):#x}>"


class ValueCell(Cell):
    """Cell constructed from an initial value."""

    writable = True

    def __init__(self, initial: Any, label: Optional[str] = None) -> None:
        super().__init__(label)
        self.initial = initial


class DerivedCell(Cell):
    """Read-only cell computed from other cells.

    Args:
        read: Called as ``read(get)``; every ``get(cell)`` it makes is tracked
            as a dependency.
        label: Optional name used in reprs and error messages
    """

    def __init__(self, read: ReadFn, label: Optional[str] = None) -> None:
        super().__init__(label)
        self.read = read


class WritableCell(DerivedCell):
    """Cell pairing a read function with a write function.

    The write function is called as ``write(get, set, *args)``. Its ``get`` is
    untracked and ``set`` writes other cells through the same runtime.
    """

    writable = True

    def __init__(self, read: ReadFn, write: WriteFn, label: Optional[str] = None) -> None:
        super().__init__(read, label)
        self.write = write
