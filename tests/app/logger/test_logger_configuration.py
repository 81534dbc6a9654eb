import logging

from src.app.logger.logger_configuration import configure_logging, logger
from src.app.service import gemini_client, prompt_builder
from src.app.utils import file_utils


def test_modules_share_the_application_logger():
    """Tous les modules journalisent via le même logger 'src.app'."""
    assert logger.name == "src.app"
    assert gemini_client.logger is logger
    assert prompt_builder.logger is logger
    assert file_utils.logger is logger


def test_configure_logging_sets_level_and_silences_httpx():
    root_logger = logging.getLogger()
    previous_level = root_logger.level
    try:
        configure_logging("debug")
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        configure_logging(logging.getLevelName(previous_level))
