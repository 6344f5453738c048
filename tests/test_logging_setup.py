"""
Logging setup tests
"""
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from logging_setup import get_log_file_path, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """setup_logging()"""

    def test_console_only(self) -> None:
        root = setup_logging(console_level=logging.WARNING)

        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.WARNING

    def test_file_handler(self, tmp_path) -> None:
        root = setup_logging(str(tmp_path / "logs"))
        logging.getLogger("splitledger.test").info("hello file")

        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        file_handlers[0].flush()
        with open(get_log_file_path(str(tmp_path / "logs")), encoding="utf-8") as f:
            assert "| INFO     | splitledger.test | hello file" in f.read()

    def test_repeated_setup_does_not_stack(self) -> None:
        setup_logging()
        root = setup_logging()
        assert len(root.handlers) == 1
