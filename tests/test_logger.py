#!/usr/bin/env python3
"""Tests for the logging setup"""

import logging

import pytest

from ghostline.logger import GhostlineLogger, logger


@pytest.fixture
def restore_logging():
    level = logger.logger.level
    yield logger
    logger.configure(level, None)


class TestGhostlineLogger:
    """Test the shared logger tree"""

    def test_singleton(self):
        assert GhostlineLogger() is logger

    def test_children_share_the_tree(self):
        assert logger.get_logger("completion.cache").name == "ghostline.completion.cache"

    def test_level_by_name(self, restore_logging):
        logger.set_level("debug")
        assert logger.logger.level == logging.DEBUG

    def test_configure_writes_log_file(self, tmp_path, restore_logging):
        log_file = logger.configure("INFO", str(tmp_path / "logs"))
        logger.get_logger("tests").info("hello from the tests")
        logger.file_handler.flush()
        assert log_file.parent == tmp_path / "logs"
        assert "ghostline.tests - INFO - hello from the tests" in log_file.read_text()

    def test_configure_without_directory_drops_file_handler(self, tmp_path, restore_logging):
        logger.configure("INFO", str(tmp_path))
        assert logger.configure("WARNING", None) is None
        assert logger.file_handler is None
        assert logger.logger.level == logging.WARNING
