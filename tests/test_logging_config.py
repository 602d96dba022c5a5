import logging

from taskline.logging_config import setup_logging, get_logger


def test_setup_logging_sets_level():
    setup_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    setup_logging("INFO")
    assert logging.getLogger().level == logging.INFO


def test_unknown_level_falls_back_to_info():
    setup_logging("LOUD")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_does_not_stack_handlers():
    setup_logging()
    setup_logging()
    assert len(logging.getLogger().handlers) == 1


def test_get_logger_uses_module_name():
    assert get_logger("taskline.services.tasks").name == "taskline.services.tasks"
