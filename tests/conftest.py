# tests/conftest.py
from __future__ import annotations

import os

import pytest

from emi_engine.config import Settings, get_settings
from emi_engine.schedule import build_schedule
from tests.utils import make_fixed_loan, make_floating_loan, make_hybrid_loan


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Drop EMI_* variables and the cached Settings around every test."""
    for key in list(os.environ):
        if key.startswith("EMI_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings()


# -------- Schedule fixtures --------
@pytest.fixture
def fixed_schedule(settings):
    return build_schedule(make_fixed_loan(), settings=settings)


@pytest.fixture
def floating_schedule(settings):
    return build_schedule(make_floating_loan(), settings=settings)


@pytest.fixture
def hybrid_schedule(settings):
    return build_schedule(make_hybrid_loan(), settings=settings)
