"""Tests for package logging setup."""

import logging

from rich.logging import RichHandler

from nvim_bindgen.logging_config import ROOT_LOGGER_NAME, get_logger, setup_logging


def test_loggers_are_nested_under_package():
    assert get_logger("nvim_bindgen.sources").name == "nvim_bindgen.sources"
    assert get_logger("nvim_bindgen").name == "nvim_bindgen"
    assert get_logger("plugin").name == "nvim_bindgen.plugin"


def test_setup_logging_installs_one_rich_handler():
    setup_logging(logging.INFO)
    setup_logging(logging.DEBUG, debug=True)

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)

    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], RichHandler)
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
