import sys

import pytest
import structlog

from stats_simulator.logs import configure_logging, configure_logging_once


@pytest.fixture
def fresh_structlog():
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


def test_configure_once_keeps_existing_configuration(fresh_structlog):
    configure_logging(stream=sys.stderr)
    factory = structlog.get_config()["logger_factory"]

    configure_logging_once()

    assert structlog.get_config()["logger_factory"] is factory


def test_configure_once_configures_when_unset(fresh_structlog):
    assert not structlog.is_configured()

    configure_logging_once()

    assert structlog.is_configured()
