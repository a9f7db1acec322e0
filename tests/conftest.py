"""Shared fixtures for snaplink tests."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def log() -> logging.Logger:
    """A propagating logger so caplog sees what the library reports."""
    logger = logging.getLogger("snaplink.test")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    return logger
