"""
Unit tests for logger configuration.
"""

import logging

from schemadb.utils.logger import configure_logging, setup_logger


class TestLogger:
    """Tests for setup_logger / configure_logging."""

    def test_console_only(self):
        """Without a log file only the console handler is attached."""
        target = setup_logger(name="schemadb.test.console", log_file=None, level="warning")

        assert target.level == logging.WARNING
        assert [type(h) for h in target.handlers] == [logging.StreamHandler]

    def test_file_handler_and_directory(self, tmp_path):
        """A log file in a missing directory is created."""
        log_file = tmp_path / "nested" / "app.log"

        target = setup_logger(name="schemadb.test.file", log_file=str(log_file))
        target.info("hello")
        for handler in target.handlers:
            handler.flush()

        assert log_file.exists()
        assert "hello" in log_file.read_text(encoding="utf-8")
        for handler in target.handlers:
            handler.close()

    def test_repeated_setup_does_not_stack_handlers(self):
        """Calling setup twice keeps a single console handler."""
        setup_logger(name="schemadb.test.repeat", log_file=None)
        target = setup_logger(name="schemadb.test.repeat", log_file=None)

        assert len(target.handlers) == 1

    def test_configure_from_config(self):
        """The logging section sets the level; debug overrides it."""
        config = {"logging": {"level": "ERROR", "log_file": None}}

        assert configure_logging(config).level == logging.ERROR
        assert configure_logging(config, debug=True).level == logging.DEBUG
