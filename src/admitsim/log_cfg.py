"""Configure logging for admitsim.

The module exposes a shared :data:`logger` and the :class:`LogConfig` helper
to tweak console/file logging for the ``admitsim`` package. Admissions and
disconnections are logged at ``INFO``, evictions at ``WARNING``, arrivals at
``DEBUG``.

Logging levels
==============
* ``logging.DEBUG`` = 10
* ``logging.INFO`` = 20
* ``logging.WARNING`` = 30
* ``logging.ERROR`` = 40
* ``logging.CRITICAL`` = 50
"""
from __future__ import annotations
import logging
import colorlog

LOGGER_NAME = "admitsim"


class LogConfig:
    """
    `LogConfig` switches the ``admitsim`` logger on or off and decides where its
    records go: a colored console handler and, optionally, a plain log file.
    """
    # Class level variable to hold the last instance created
    _last_instance = None

    class _LoggingEnabledFilter(logging.Filter):
        def __init__(self, log_instance: LogConfig):
            super().__init__()
            self.log_instance = log_instance

        def filter(self, record):
            return self.log_instance.enabled

    def __init__(self, enabled=False, console_level=logging.INFO, file_level=logging.DEBUG,
                 file_path='admitsim.log'):

        self.enabled = enabled
        """Whether records reach the handlers at all."""

        self._logger = logging.getLogger(LOGGER_NAME)
        self._clear_existing_handlers()

        self._console_level = console_level
        self._file_level = file_level
        self._file_path = file_path

        self._console_handler = logging.StreamHandler()

        # File output only when enabled and a path is given
        self._file_handler = None
        if self.enabled and self._file_path:
            self._file_handler = logging.FileHandler(self.file_path)

        self._configure_logger()
        LogConfig._last_instance = self

    def _clear_existing_handlers(self) -> None:
        """Remove handlers from the shared logger to prevent duplicates across instances."""
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

    @property
    def logger(self) -> logging.Logger:
        """The shared ``admitsim`` logger."""
        return self._logger

    @property
    def console_level(self) -> int:
        return self._console_level

    @console_level.setter
    def console_level(self, value) -> None:
        """
        Args:
            value (int): The level to be assigned to the console handler.
        """
        self._console_level = value
        self._console_handler.setLevel(value)

    @property
    def file_level(self) -> int:
        return self._file_level

    @file_level.setter
    def file_level(self, value) -> None:
        self._file_level = value
        if self._file_handler:
            self._file_handler.setLevel(value)

    @property
    def file_path(self) -> str:
        """Return the file path"""
        return self._file_path

    def _configure_logger(self):
        self.logger.setLevel(logging.DEBUG)

        filt = self._LoggingEnabledFilter(self)

        console_handler = self._console_handler
        console_handler.setLevel(self.console_level)
        console_handler.addFilter(filt)

        # green admissions, cyan evictions, yellow arrivals
        formatter = colorlog.ColoredFormatter(
            '%(log_color)s%(asctime)s | %(message)s',
            datefmt='%H:%M:%S',
            log_colors={
                'DEBUG': 'yellow',
                'INFO': 'green',
                'WARNING': 'cyan',
                'ERROR': 'red',
                'CRITICAL': 'bold_red'
            }
        )
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if self._file_handler:
            file_handler = self._file_handler
            file_handler.setLevel(self.file_level)
            file_handler.setFormatter(logging.Formatter('%(asctime)s:%(levelname)s:%(message)s'))
            file_handler.addFilter(filt)
            self.logger.addHandler(file_handler)

    @classmethod
    def last_instance(cls) -> LogConfig:
        """Return the latest :class:`LogConfig` instance or create a default one."""
        if cls._last_instance is None:
            return LogConfig(
                enabled=False,
                console_level=logging.INFO,
                file_level=logging.DEBUG,
                file_path="admitsim.log",
            )
        return cls._last_instance

def log_config() -> LogConfig:
    """Return the current :class:`LogConfig` instance."""
    return LogConfig.last_instance()


logger = logging.getLogger(LOGGER_NAME)
