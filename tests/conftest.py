import logging

import pytest

log_capture: list[str] = []


class ListLogHandler(logging.Handler):
    def emit(self, record):
        log_capture.append(self.format(record))


@pytest.fixture(autouse=True)
def reset_logging_capture():
    log_capture.clear()


@pytest.fixture
def lazycrate_logs():
    """Collect records emitted on the ``lazycrate`` logger tree at DEBUG level."""
    logger = logging.getLogger("lazycrate")
    handler = ListLogHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)
