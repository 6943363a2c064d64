"""Root test configuration: keep package logging state isolated between tests"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers installed by configure_logging (CLI tests call it)."""
    yield
    logger = logging.getLogger("mdcrdt")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
