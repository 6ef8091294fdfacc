import logging

from game_localizer.logging_config import PACKAGE_LOGGER_NAME, TqdmLoggingHandler, setup_logger


def _close_handlers(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logger_with_file_and_console(tmp_path):
    log_file = tmp_path / "logs" / "localizer.log"
    logger = setup_logger("DEBUG", str(log_file), True)
    try:
        assert logger.name == PACKAGE_LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert any(isinstance(h, TqdmLoggingHandler) for h in logger.handlers)

        logging.getLogger("game_localizer.translation_resolver").warning("Missing translation key: 'x'")
        for handler in logger.handlers:
            handler.flush()
        assert "Missing translation key" in log_file.read_text(encoding="utf-8")
    finally:
        _close_handlers(logger)


def test_setup_logger_without_file(tmp_path):
    logger = setup_logger("warning", None, False)
    try:
        assert logger.level == logging.WARNING
        assert logger.handlers == []
    finally:
        _close_handlers(logger)


def test_repeated_setup_does_not_duplicate_handlers():
    logger = setup_logger("INFO", None, True)
    logger = setup_logger("INFO", None, True)
    try:
        assert len(logger.handlers) == 1
    finally:
        _close_handlers(logger)


def test_unknown_level_falls_back_to_info():
    logger = setup_logger("CHATTY", None, False)
    assert logger.level == logging.INFO
