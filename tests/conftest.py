"""Pytest configuration and fixtures for affordance tests.

This module provides pytest hooks and fixtures that apply across all tests.
"""

import gc
import logging

import pytest

console_logger = logging.getLogger(__name__)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_teardown(item, nextitem):
    """Force garbage collection after each test to clean up Drake C++ objects."""
    gc.collect()
    console_logger.debug(f"Garbage collection completed after test: {item.nodeid}")
