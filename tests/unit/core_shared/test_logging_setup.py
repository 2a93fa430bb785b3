import logging

from dolly.utils.logging import setup_logging, get_logger


def test_setup_logging_adds_file_handler(tmp_path):
    log_path = tmp_path / "logs" / "dolly.log"

    logger = setup_logging(level="INFO", log_file=log_path, verbose=False)

    handlers = [type(h) for h in logger.handlers]
    assert logging.FileHandler in handlers
    assert logging.StreamHandler in handlers
    assert log_path.parent.exists()


def test_setup_logging_verbose_formatter():
    logger = setup_logging(level="DEBUG", verbose=True)

    formatters = [h.formatter for h in logger.handlers if h.formatter]
    assert any("%(asctime)s" in f._fmt for f in formatters)
    assert logger.level == logging.DEBUG


def test_setup_logging_replaces_handlers():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_setup_logging_quiets_http_libraries():
    setup_logging(level="DEBUG")
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_get_logger_returns_named_logger():
    assert get_logger("dolly.core").name == "dolly.core"


def test_log_file_records_debug_detail(tmp_path, capsys):
    log_path = tmp_path / "dolly.log"
    logger = setup_logging(level="INFO", log_file=str(log_path))

    get_logger("dolly.core.audioshake").debug("request body")
    get_logger("dolly.core.audioshake").info("task created")
    for handler in logger.handlers:
        handler.flush()

    content = log_path.read_text()
    assert "DEBUG - request body" in content
    assert "INFO - task created" in content
    console = capsys.readouterr().out
    assert "request body" not in console
    assert "INFO: task created" in console
