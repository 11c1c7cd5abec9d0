"""Common test fixtures."""

import os
from unittest.mock import patch

import pytest

from graphql_persisted_document.loader import MemoryUnitSource


@pytest.fixture(autouse=True)
def isolated_environment():
    """Keep GRAPHQL_PERSISTED_* variables from the host out of option defaults."""
    env = {key: value for key, value in os.environ.items() if not key.startswith("GRAPHQL_PERSISTED_")}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def memory_source() -> MemoryUnitSource:
    return MemoryUnitSource()
