import logging

import pytest
from rich.logging import RichHandler

from study_tracker.logging_config import setup_logging


@pytest.fixture
def root_handlers():
    root_logger = logging.getLogger()
    saved = list(root_logger.handlers)
    saved_level = root_logger.level
    for handler in saved:
        root_logger.removeHandler(handler)
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in saved:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


def test_setup_logging_is_idempotent(root_handlers):
    setup_logging("DEBUG")
    setup_logging("DEBUG")
    rich_handlers = [h for h in root_handlers.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert root_handlers.level == logging.DEBUG


def test_setup_logging_writes_file(root_handlers, tmp_path):
    log_file = tmp_path / "logs" / "tracker.log"
    setup_logging("INFO", str(log_file))
    logging.getLogger("study_tracker.test").info("hola")
    for handler in root_handlers.handlers:
        handler.flush()
    assert "hola" in log_file.read_text(encoding="utf-8")
