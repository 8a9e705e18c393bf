"""Shared pytest configuration."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """Remove root log handlers a test added so tests stay independent."""
    root_logger = logging.getLogger()
    before = list(root_logger.handlers)
    yield
    for handler in list(root_logger.handlers):
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()
