import pytest

from atomic_store.core.configuration import ConfigManager, RuntimeConfig
from atomic_store.core.runtime import CellRuntime, reset_default_runtime


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without ATOMIC_STORE_* variables and undo any that leak in."""
    for name in ConfigManager.ENV_MAP:
        # setenv first so the undo step removes whatever ends up set
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    reset_default_runtime()
    yield
    reset_default_runtime()


@pytest.fixture
def config():
    return RuntimeConfig()


@pytest.fixture
def runtime(config):
    return CellRuntime(config)


class Counter:
    count = 0

    @property
    def double(self):
        return self.count * 2

    def increment(self, n=1):
        return {"count": self.count + n}


@pytest.fixture
def counter_store(config):
    from atomic_store.state.store import create_atomic_store

    return create_atomic_store(Counter, config=config)
