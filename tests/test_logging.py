import logging

import pytest

from catalog_api.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_catalog_level():
    catalog = logging.getLogger("catalog_api")
    level = catalog.level
    yield
    catalog.setLevel(level)


def test_log_level_applies_when_root_is_already_configured():
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    handlers_before = list(root.handlers)
    try:
        configure_logging("debug")
        assert logging.getLogger("catalog_api").level == logging.DEBUG
        assert get_logger("catalog_api.repositories").isEnabledFor(logging.DEBUG)

        configure_logging("WARNING")
        assert not get_logger("catalog_api.repositories").isEnabledFor(logging.INFO)
        assert root.handlers == handlers_before
    finally:
        root.removeHandler(handler)


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty")
    assert logging.getLogger("catalog_api").level == logging.INFO


def test_get_logger_defaults_to_catalog_logger():
    assert get_logger().name == "catalog_api"
    assert get_logger("catalog_api.seed").parent.name == "catalog_api"
