"""Shared fixtures for pathgate tests."""

import pytest

from pathgate import secure_fs
from pathgate.policy.store import PolicyStore
from pathgate.tools.sandbox import PathResolver


@pytest.fixture
def fresh_secure_fs(monkeypatch: pytest.MonkeyPatch) -> PolicyStore:
    """Give the module-level facade an empty store for the duration of a test."""
    store = PolicyStore()
    monkeypatch.setattr(secure_fs, "_store", store)
    monkeypatch.setattr(secure_fs, "_resolver", PathResolver(store))
    monkeypatch.setattr(secure_fs, "_timezone", "UTC")
    return store
