import argparse
import io
import logging

import pytest

import intlang.logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


def test_init():
    stream = io.StringIO()
    intlang.logging.init(argparse.Namespace(log_level="warning"), stream)
    logger = logging.getLogger("intlang.test")
    logger.info("hidden message")
    logger.warning("shown message")
    assert "hidden message" not in stream.getvalue()
    assert "shown message" in stream.getvalue()
    assert "WARNING" in stream.getvalue()


def test_httpx_quiet():
    intlang.logging.init(argparse.Namespace(log_level="debug"), io.StringIO())
    assert logging.getLogger("httpx").level == logging.WARNING


def test_single_handler():
    first = io.StringIO()
    second = io.StringIO()
    intlang.logging.setTerminalLogging(first)
    intlang.logging.setTerminalLogging(second)
    logging.getLogger("intlang.test").error("message")
    assert first.getvalue() == ""
    assert "message" in second.getvalue()
