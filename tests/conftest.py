"""Root conftest — shared test configuration.

Invariants:
    - Settings cache cleared around every test so env overrides never leak
    - Stage tracing off by default; tests opt in via monkeypatch or explicit options
"""

import os

import pytest

from membrane.config import get_settings

os.environ.setdefault("MEMBRANE_TRACE_STAGES", "false")
os.environ.setdefault("MEMBRANE_LOG_FORMAT", "json")


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
