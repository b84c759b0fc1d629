"""Shared fixtures for the MapQuest geocoder tests."""

from __future__ import annotations

import logging

import pytest

from mapquest_geocoder.log import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _reset_package_logging():
    """Drop handlers added during a test so they never outlive its streams."""
    yield
    for name in (PACKAGE_LOGGER, f"{PACKAGE_LOGGER}.http"):
        log = logging.getLogger(name)
        for handler in list(log.handlers):
            log.removeHandler(handler)
        log.setLevel(logging.NOTSET)
