import logging

import pytest

from polycsg import tolerance
from polycsg.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def _restore_defaults():
    yield
    tolerance.reset()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
