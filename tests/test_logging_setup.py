"""Tests for the logging bootstrap."""

import logging

import pytest

from core.infrastructure.logging import LOG_FORMAT, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_installs_one_handler(restore_root_logger):
    root = restore_root_logger

    configure_logging("DEBUG")
    configure_logging("WARNING")

    ours = [h for h in root.handlers if getattr(h, "_order_service_handler", False)]
    assert len(ours) == 1
    assert ours[0].formatter._fmt == LOG_FORMAT
    assert root.level == logging.WARNING
    assert logging.getLogger("aiohttp.access").level == logging.WARNING
