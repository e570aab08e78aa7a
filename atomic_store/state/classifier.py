"""Definition classifier.

Splits a state description into base fields, derived getters and actions in
a single pass. A description is either a class (its own namespace, in
declaration order) or a mapping:

    class Counter:
        count = 0

        @property
        def double(self):
            return self.count * 2

        def increment(self, n=1):
            return {"count": self.count + n}
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Union


class PropertyKind(Enum):
    """Kind of handle a description entry turns into."""
    BASE = "base"
    DERIVED = "derived"
    ACTION = "action"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a description.

    Fields:
        kinds: key -> PropertyKind, in declaration order
        base: key -> initial value
        derived: key -> getter function
        actions: key -> action function
    """
    kinds: Dict[str, PropertyKind] = field(default_factory=dict)
    base: Dict[str, Any] = field(default_factory=dict)
    derived: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    actions: Dict[str, Callable[..., Any]] = field(default_factory=dict)

    def keys(self) -> List[str]:
        return list(self.kinds)


def _own_properties(definition: Union[type, Mapping[str, Any]]) -> Dict[str, Any]:
    if inspect.isclass(definition):
        return {
            name: value
            for name, value in vars(definition).items()
            if not (name.startswith("__") and name.endswith("__"))
        }
    if isinstance(definition, Mapping):
        return dict(definition)
    raise TypeError(
        f"State description must be a class or a mapping, got {type(definition).__name__}"
    )


def _getter_of(value: Any) -> Any:
    """Return the getter function of an accessor, or None for data entries."""
    if isinstance(value, property):
        return value.fget
    if isinstance(value, functools.cached_property):
        return value.func
    return None


def _static_action(function: Callable[..., Any]) -> Callable[..., Any]:
    """Adapt a staticmethod body to the action calling convention."""

    @functools.wraps(function)
    def action(context: Any, *args: Any) -> Any:
        return function(*args)

    return action


def classify(definition: Union[type, Mapping[str, Any]]) -> Classification:
    """Classify every own entry of a state description.

    An accessor (property, with or without a setter) is derived, whatever it
    would return; the setter is ignored. A staticmethod is an action that is
    called without the store context. Any other callable is an action.
    Everything else is base state.

    Args:
        definition: A class or a mapping of key -> entry

    Returns:
        The classification, with keys in declaration order

    Raises:
        TypeError: If the description is neither a class nor a mapping, or
            an entry is a classmethod
    """
    result = Classification()
    for key, value in _own_properties(definition).items():
        getter = _getter_of(value)
        if getter is not None:
            result.kinds[key] = PropertyKind.DERIVED
            result.derived[key] = getter
        elif isinstance(value, classmethod):
            raise TypeError(f"classmethod '{key}' cannot be used in a state description")
        elif isinstance(value, staticmethod):
            result.kinds[key] = PropertyKind.ACTION
            result.actions[key] = _static_action(value.__func__)
        elif callable(value):
            result.kinds[key] = PropertyKind.ACTION
            result.actions[key] = value
        else:
            result.kinds[key] = PropertyKind.BASE
            result.base[key] = value
    return result
