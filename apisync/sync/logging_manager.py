"""
Centralized Logging Management for the Sync Module.

All sync components log through the ``apisync.sync`` logger so that a run
produces one stream of JSON records, on stdout and optionally in a file.
Anything passed as ``extra={'details': {...}}`` (module, status code,
collection id) is emitted as a ``details`` object.

The first ``get_logger`` call installs INFO-level handlers; the CLI then
calls ``LoggingManager.configure`` with the level and file it was given.
"""

import json
import logging
import sys
from typing import Optional

LOGGER_NAME = "apisync.sync"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        details = getattr(record, 'details', None)
        if details is not None:
            entry['details'] = details
        if record.exc_info:
            entry['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class LoggingManager:
    """
    Owns the handlers of the ``apisync.sync`` logger.

    A single instance exists; ``configure`` replaces it, closing the handlers
    of the previous one.
    """
    _instance: Optional['LoggingManager'] = None

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None):
        self.log_level = log_level.upper()
        self.log_file = log_file
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(self.log_level)
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        handlers = [logging.StreamHandler(sys.stdout)]
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        for handler in handlers:
            handler.setLevel(self.log_level)
            handler.setFormatter(JsonFormatter())
            self.logger.addHandler(handler)

    @classmethod
    def configure(cls, log_level: str = "INFO", log_file: Optional[str] = None) -> 'LoggingManager':
        """Install handlers for ``log_level`` and, if given, ``log_file``."""
        cls._instance = cls(log_level=log_level, log_file=log_file)
        return cls._instance

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if cls._instance is None:
            cls.configure()
        return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    return LoggingManager.get_logger(name)
