import logging

import pytest

# Loggers that setup_logging gives their own handlers
_CONFIGURED_LOGGERS = ("", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")


@pytest.fixture(autouse=True)
def restore_logging():
    """Tests here reconfigure logging; put the session configuration back afterwards."""
    saved = {}
    for name in _CONFIGURED_LOGGERS:
        logger = logging.getLogger(name)
        saved[name] = (logger.handlers[:], logger.filters[:], logger.level)
    yield
    for name, (handlers, filters, level) in saved.items():
        logger = logging.getLogger(name)
        logger.handlers[:] = handlers
        logger.filters[:] = filters
        logger.setLevel(level)
