"""
Shared pytest fixtures for metacreate tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import gc as _gc
import os as _os
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import metacreate.config as config

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "METACREATE_STRICT_TRAPS",
    "METACREATE_EXTRA_TRAPS",
]


def clean_env() -> dict[str, str]:
    """Return environment dict with metacreate keys removed."""
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture(autouse=True)
def isolated_settings() -> _typing.Iterator[None]:
    """Load settings from a clean environment for every test."""
    with _mock.patch.dict(_os.environ, clean_env(), clear=True):
        config.reload_settings()
        yield
    config.reload_settings()


@_pytest.fixture
def strict_traps() -> _typing.Iterator[config.Settings]:
    """Enable strict trap checking for the duration of a test."""
    with _mock.patch.dict(_os.environ, {"METACREATE_STRICT_TRAPS": "true"}):
        yield config.reload_settings()
    config.reload_settings()


@_pytest.fixture
def collect() -> _typing.Callable[[], None]:
    """Return a function forcing a full garbage collection."""

    def run() -> None:
        for _ in range(3):
            _gc.collect()

    return run
