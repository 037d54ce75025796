"""Pytest configuration file with a fixture isolating catalog changes."""

import pytest

from dualdiff import dispatch
from dualdiff.rules import catalog

__all__ = ["isolated_catalog"]


@pytest.fixture
def isolated_catalog(monkeypatch):
    """Lets a test add catalog entries without leaking them into other tests.

    The installed rule table is rebuilt from the original catalog afterwards.
    """
    monkeypatch.setattr(catalog, "_DIFFRULES", dict(catalog._DIFFRULES))
    yield catalog
    monkeypatch.undo()
    dispatch.rule_table.cache_clear()
    dispatch.rule_table()
