"""Shared test fixtures for dockersshell tests."""

from collections.abc import Callable

import pytest

from .fakes import FakeContainerAPI, FakePool


@pytest.fixture
def make_pool() -> Callable[[dict[str, FakeContainerAPI | None]], FakePool]:
    """Build a FakePool from an address-to-endpoint mapping."""
    return FakePool
