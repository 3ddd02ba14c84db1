import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_gpinstall_logger():
    # init_logging() detaches the logger from the root and binds handlers to
    # the streams of the current test; undo that so tests stay independent
    yield
    logger = logging.getLogger("gpinstall")
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
