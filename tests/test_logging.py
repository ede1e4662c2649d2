import logging
from logging.handlers import RotatingFileHandler

import pytest

from catalog_api.app.core.logging_config import setup_logging


@pytest.fixture
def logger(request):
    # Not registered with the manager, so no plugin can hang handlers on it.
    target = logging.Logger(f"catalog-test.{request.node.name}")
    target.propagate = False
    target.handlers = []
    yield target
    for handler in target.handlers:
        handler.close()
    target.handlers = []


def test_setup_logging_with_file(logger, tmp_path):
    logfile = tmp_path / "logs" / "catalog.log"
    assert setup_logging("debug", str(logfile), root=logger) is True
    assert logger.level == logging.DEBUG
    assert any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers)
    assert logging.getLogger("uvicorn.access").level == logging.WARNING

    logger.info("Film angelegt")
    for handler in logger.handlers:
        handler.flush()
    assert f"[INFO] {logger.name}: Film angelegt" in logfile.read_text(encoding="utf-8")


def test_setup_logging_runs_once(logger):
    assert setup_logging("INFO", root=logger) is True
    assert setup_logging("DEBUG", root=logger) is False
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_unknown_level_falls_back_to_info(logger):
    setup_logging("chatty", root=logger)
    assert logger.level == logging.INFO


def test_handlers_on_other_loggers_do_not_count(logger):
    foreign = logging.NullHandler()
    logging.getLogger().addHandler(foreign)
    try:
        assert setup_logging("INFO", root=logger) is True
    finally:
        logging.getLogger().removeHandler(foreign)
    assert len(logger.handlers) == 1
