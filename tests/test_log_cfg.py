import logging
from pathlib import Path

from admitsim.admission import AdmissionController
from admitsim.log_cfg import LogConfig, log_config
from admitsim.users import User


def _file_handlers(logger: logging.Logger):
    return [handler for handler in logger.handlers if isinstance(handler, logging.FileHandler)]


def test_handlers_not_duplicated(tmp_path: Path):
    log_path = tmp_path / "admitsim.log"

    first = LogConfig(enabled=True, file_path=str(log_path))
    first_count = len(first.logger.handlers)

    second = LogConfig(enabled=True, file_path=str(log_path))

    assert len(second.logger.handlers) == first_count
    assert len(_file_handlers(second.logger)) == 1
    assert log_config() is second


def test_file_handler_not_created_when_disabled(tmp_path: Path):
    log_path = tmp_path / "admitsim_disabled.log"

    cfg = LogConfig(enabled=False, file_path=str(log_path))

    assert len(_file_handlers(cfg.logger)) == 0
    assert not log_path.exists()


def test_file_handler_optional(tmp_path: Path):
    cfg = LogConfig(enabled=True, file_path=None)

    assert len(_file_handlers(cfg.logger)) == 0
    assert len(cfg.logger.handlers) == 1


def test_admissions_reach_the_log_file(tmp_path: Path):
    log_path = tmp_path / "events.log"
    cfg = LogConfig(enabled=True, file_path=str(log_path))

    controller = AdmissionController(1)
    controller.enqueue(User("A", 2))
    controller.process_one_admission()
    for handler in cfg.logger.handlers:
        handler.flush()

    assert "INFO:A connected to the server (1/1)" in log_path.read_text()
    LogConfig(enabled=False, file_path=None)
