import logging

from dork_harvester.logging_utils import LOGGER_NAME, configure_logging, get_logger


def test_get_logger_returns_package_logger() -> None:
    assert get_logger() is logging.getLogger("dork_harvester")
    assert get_logger().name == LOGGER_NAME


def test_configure_logging_is_safe_to_repeat() -> None:
    configure_logging(verbose=True)
    configure_logging(verbose=False)
    assert logging.getLogger().handlers
