"""Tests for hilfsmittel/common/log_config.py"""

import logging
import sys

from hilfsmittel.common.log_config import setup_logging


class TestSetupLogging:
    def teardown_method(self):
        """Reset logger between tests."""
        logger = logging.getLogger("hilfsmittel")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logging.getLogger("urllib3").setLevel(logging.NOTSET)

    def test_default_level_is_info(self):
        setup_logging()
        assert logging.getLogger("hilfsmittel").level == logging.INFO

    def test_verbose_sets_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger("hilfsmittel").level == logging.DEBUG

    def test_quiet_sets_warning(self):
        setup_logging(quiet=True)
        assert logging.getLogger("hilfsmittel").level == logging.WARNING

    def test_handler_outputs_to_stderr(self):
        setup_logging()
        logger = logging.getLogger("hilfsmittel")
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr

    def test_repeated_calls_do_not_duplicate_handlers(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger("hilfsmittel").handlers) == 1

    def test_module_loggers_propagate_to_package_logger(self, caplog):
        setup_logging()
        with caplog.at_level(logging.INFO, logger="hilfsmittel"):
            logging.getLogger("hilfsmittel.catalog.client").info("hello")
        assert "hello" in caplog.text

    def test_log_file_receives_records(self, tmp_path):
        log_file = tmp_path / "refresh.log"
        setup_logging(log_file=str(log_file))
        logging.getLogger("hilfsmittel.catalog").warning("upstream slow")

        for handler in logging.getLogger("hilfsmittel").handlers:
            handler.flush()
        assert "WARNING" in log_file.read_text(encoding="utf-8")
        assert "upstream slow" in log_file.read_text(encoding="utf-8")

    def test_urllib3_quiet_unless_verbose(self):
        setup_logging()
        assert logging.getLogger("urllib3").level == logging.WARNING
        setup_logging(verbose=True)
        assert logging.getLogger("urllib3").level == logging.DEBUG
