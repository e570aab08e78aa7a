"""
Tests for action dispatch: receiver writes, patches and failure behaviour.
"""

import logging

import pytest

from atomic_store.core.configuration import RuntimeConfig
from atomic_store.core.errors import InvalidWriteError, UnknownKeyError
from atomic_store.state.actions import Patch, apply_patch
from atomic_store.state.root import RootState
from atomic_store.state.store import create_atomic_store


class Counter:
    count = 0
    step = 1

    @property
    def double(self):
        return self.count * 2

    def increment(self, n=1):
        return {"count": self.count + n}

    def set_then_patch(self):
        self.count = 10
        return {"count": self.count + 1}

    def write_derived(self):
        self.double = 3

    def write_action(self):
        self.increment = None

    def write_unknown(self):
        self["missing"] = 1

    def write_only(self, value):
        self.set("count", value)

    def nothing(self):
        return None

    def empty(self):
        return {}

    def not_a_mapping(self):
        return 5

    def with_extra_keys(self):
        return {"count": 1, "double": 99, "bogus": 2}

    def increment_twice(self):
        self.increment()
        self.increment(2)

    def fail_halfway(self):
        self.count = 5
        raise ValueError("halfway")

    @staticmethod
    def reset(to=0):
        return {"count": to}


@pytest.fixture
def store(config):
    return create_atomic_store(Counter, config=config)


def test_receiver_write_visible_to_later_reads(runtime, store):
    """A direct write is seen by the returned patch in the same dispatch."""
    runtime.set(store.set_then_patch)

    assert runtime.get(store.count) == 11
    assert runtime.get(store.double) == 22


def test_writing_derived_key_fails(runtime, store):
    with pytest.raises(InvalidWriteError) as excinfo:
        runtime.set(store.write_derived)

    assert excinfo.value.key == "double"
    assert "double" in str(excinfo.value)


def test_writing_action_key_fails(runtime, store):
    with pytest.raises(InvalidWriteError) as excinfo:
        runtime.set(store.write_action)

    assert excinfo.value.key == "increment"


def test_writing_unknown_key_fails(runtime, store):
    with pytest.raises(InvalidWriteError) as excinfo:
        runtime.set(store.write_unknown)

    assert excinfo.value.key == "missing"


def test_explicit_set_method(runtime, store):
    runtime.set(store.write_only, 7)

    assert runtime.get(store.count) == 7


def test_absent_or_empty_return_changes_nothing(runtime, store):
    runtime.set(store.count, 3)

    runtime.set(store.nothing)
    runtime.set(store.empty)
    runtime.set(store.not_a_mapping)

    assert runtime.get(store.count) == 3


def test_patch_keys_outside_base_state_are_ignored(runtime, store):
    runtime.set(store.with_extra_keys)

    assert runtime.get(store.count) == 1
    assert runtime.get(store.double) == 2
    assert runtime.get(store.step) == 1


def test_ignored_patch_keys_logged_when_enabled(runtime, caplog):
    store = create_atomic_store(Counter, config=RuntimeConfig(warn_on_unknown_patch_keys=True))

    with caplog.at_level(logging.WARNING, logger="atomic_store"):
        runtime.set(store.with_extra_keys)

    assert "Ignoring patch keys outside base state: double, bogus" in caplog.text


def test_actions_can_dispatch_other_actions(runtime, store):
    runtime.set(store.increment_twice)

    assert runtime.get(store.count) == 3


def test_failed_dispatch_keeps_earlier_writes(runtime, store):
    """No rollback: writes before the failure stay applied."""
    with pytest.raises(ValueError, match="halfway"):
        runtime.set(store.fail_halfway)

    assert runtime.get(store.count) == 5


def test_multi_key_patch_observed_as_one_update(runtime, config):
    class Position:
        x = 0
        y = 0

        @property
        def point(self):
            return (self.x, self.y)

        def move(self, x, y):
            return {"x": x, "y": y}

    store = create_atomic_store(Position, config=config)
    points = []
    records = []
    runtime.subscribe(store.point, points.append)
    runtime.subscribe(store.root, records.append)

    runtime.set(store.move, 1, 2)

    assert points == [(1, 2)]
    assert len(records) == 1
    assert records[0] == {"x": 1, "y": 2}


def test_apply_patch_folds_keys_into_one_write(runtime):
    root = RootState({"a": 0, "b": 0})
    writes = []

    def spy_set(cell, value):
        writes.append(value)
        runtime.set(cell, value)

    apply_patch(root, runtime.get, spy_set, {"a": 1, "b": 2, "c": 3})

    assert writes == [{"a": 1, "b": 2}]
    assert runtime.get(root.cell) == {"a": 1, "b": 2}


def test_apply_patch_ignores_non_mappings(runtime):
    root = RootState({"a": 0})

    apply_patch(root, runtime.get, runtime.set, None)
    apply_patch(root, runtime.get, runtime.set, [("a", 1)])

    assert runtime.get(root.handles["a"]) == 0


def test_typed_patch(runtime, config):
    holder = {}

    class Form:
        name = ""
        email = ""

        def fill(self, name, email):
            return holder["store"].patch(name=name, email=email)

    store = create_atomic_store(Form, config=config)
    holder["store"] = store

    runtime.set(store.fill, "Ada", "ada@example.com")

    assert runtime.get(store.name) == "Ada"
    assert runtime.get(store.email) == "ada@example.com"


def test_typed_patch_rejects_unknown_keys(store):
    patch = store.patch(count=2)

    assert isinstance(patch, Patch)
    assert dict(patch) == {"count": 2}
    with pytest.raises(UnknownKeyError):
        store.patch(double=4)


def test_staticmethod_action_dispatches_without_context(runtime, store):
    runtime.set(store.count, 7)

    runtime.set(store.reset)
    assert runtime.get(store.count) == 0

    runtime.set(store.reset, 3)
    assert runtime.get(store.count) == 3
