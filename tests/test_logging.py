import logging

import pytest

from apps.helpdesk.core import logging as helpdesk_logging
from apps.helpdesk.core.config import Settings
from apps.helpdesk.core.logging import configure_logging, init_tracer, parse_otlp_headers, shutdown_tracer


@pytest.fixture
def restore_loggers():
    names = ("apps.helpdesk", "uvicorn.error", "")
    saved = {
        name: (logger.level, list(logger.handlers), logger.propagate)
        for name, logger in ((n, logging.getLogger(n)) for n in names)
    }
    yield
    for name, (level, handlers, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers[:] = handlers
        logger.propagate = propagate


def test_parse_otlp_headers_skips_malformed_items():
    assert parse_otlp_headers("api-key=abc, team = it ,broken,=x") == {"api-key": "abc", "team": "it"}
    assert parse_otlp_headers(None) == {}


def test_configure_logging_sets_app_level(restore_loggers):
    logger = configure_logging(Settings(log_level="debug"))

    assert logger.name == "apps.helpdesk"
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert logging.getLogger().level == logging.WARNING


def test_init_tracer_is_noop_when_disabled():
    assert init_tracer(Settings(otel_enabled=False)) is None
    assert helpdesk_logging._TRACER_INITIALISED is False
    shutdown_tracer(None)
