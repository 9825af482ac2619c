import os

import pytest

from buildkit.config import get_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep BUILDKIT_* variables from the outer environment out of the tests."""
    for name in list(os.environ):
        if name.startswith("BUILDKIT_"):
            monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
