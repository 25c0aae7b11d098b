"""Shared fixtures for store and manager tests."""

import pytest

from linkminder.storage import MemoryKeyValueStore, PersistenceStore


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return PersistenceStore(kv)
