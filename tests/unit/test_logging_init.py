from __future__ import annotations

import logging
from io import StringIO

from well_assistant.logging.init import (
    LOGGER_NAME,
    enable_debug,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging(stream=StringIO())

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging(stream=StringIO())
    assert setup_logging() is first
    assert get_logger() is first
    assert len(first.handlers) == 1


def test_labeled_prefixes():
    out = StringIO()
    logger = setup_logging(stream=out)

    logger.info("Processing files from: ./data")
    logger.warning("llm call failed")
    logger.error("config: missing")
    log_summary("files=1/1 accepted=1")

    assert out.getvalue().splitlines() == [
        "INFO Processing files from: ./data",
        "WARN llm call failed",
        "ERROR config: missing",
        "SUMMARY files=1/1 accepted=1",
    ]


def test_module_loggers_share_the_handler():
    out = StringIO()
    setup_logging(stream=out)

    logging.getLogger("well_assistant.services.chat").warning("fallback used")

    assert out.getvalue() == "WARN fallback used\n"


def test_debug_hidden_until_enabled():
    out = StringIO()
    logger = setup_logging(stream=out)

    logger.debug("hidden")
    enable_debug(logger)
    logger.debug("shown")

    assert out.getvalue() == "DEBUG shown\n"
