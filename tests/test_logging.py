"""Tests for diagnostic logging setup."""

import logging

import pytest

from headerscope.logging import configure_logging, get_logger


@pytest.fixture
def reset_headerscope_logger():
    yield
    logger = logging.getLogger("headerscope")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestGetLogger:
    def test_module_logger_is_namespaced(self):
        assert get_logger("extractor").name == "headerscope.extractor"
        assert get_logger().name == "headerscope"


class TestConfigureLogging:
    def test_default_level_is_info(self, reset_headerscope_logger):
        logger = configure_logging()

        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert len(logger.handlers) == 1

    def test_verbose_enables_debug(self, reset_headerscope_logger):
        assert configure_logging(verbose=True).level == logging.DEBUG

    def test_repeated_calls_replace_handlers(self, reset_headerscope_logger):
        configure_logging()
        logger = configure_logging()

        assert len(logger.handlers) == 1

    def test_log_file_receives_module_records(self, temp_dir, reset_headerscope_logger):
        log_file = temp_dir / "logs" / "headerscope.log"
        logger = configure_logging(verbose=True, log_file=log_file)

        get_logger("doc_checker").debug("include/a.h: %d changed public declaration(s)", 2)
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text()
        assert "DEBUG headerscope.doc_checker: include/a.h: 2 changed public declaration(s)" in content
