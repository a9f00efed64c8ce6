"""Shared pytest fixtures for all tests."""
import pytest

from lifecycle_accumulator import InMemoryAccumulator


@pytest.fixture
def accumulator() -> InMemoryAccumulator:
    """Fresh accumulator with default configuration."""
    return InMemoryAccumulator()
