import logging
import os
import sys

LOGGER_NAME = "copilot_assistant"


class LoggingUtility:

    def __init__(self, name: str = LOGGER_NAME, include_caller_info=True):
        self.include_caller_info = include_caller_info
        self.logger = logging.getLogger(name)
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
        if self.include_caller_info:
            log_format = (
                "%(asctime)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s"
            )
        self.formatter = logging.Formatter(log_format)
        self.level = self._resolve_level(os.getenv("COPILOT_LOG_LEVEL", "INFO"))
        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(self.level)
        self.console_handler.setFormatter(self.formatter)
        if not self.logger.handlers:
            self.logger.addHandler(self.console_handler)
        self.logger.setLevel(self.level)
        self.handler = self.logger.handlers[0]

    @staticmethod
    def _resolve_level(raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    def _get_log_args(self):
        """Helper to add stacklevel when caller info is enabled"""
        if self.include_caller_info:
            return {"stacklevel": 2} if sys.version_info >= (3, 8) else {}
        return {}

    def set_level(self, level) -> None:
        if isinstance(level, str):
            level = self._resolve_level(level)
        self.level = level
        self.logger.setLevel(level)
        self.handler.setLevel(level)

    def debug(self, message, *args, **kwargs):
        self.logger.debug(message, *args, **{**self._get_log_args(), **kwargs})

    def info(self, message, *args, **kwargs):
        self.logger.info(message, *args, **{**self._get_log_args(), **kwargs})

    def warning(self, message, *args, **kwargs):
        self.logger.warning(message, *args, **{**self._get_log_args(), **kwargs})

    def error(self, message, *args, **kwargs):
        self.logger.error(message, *args, **{**self._get_log_args(), **kwargs})

    def critical(self, message, *args, **kwargs):
        self.logger.critical(message, *args, **{**self._get_log_args(), **kwargs})

    def exception(self, message, *args, **kwargs):
        self.logger.exception(message, *args, **{**self._get_log_args(), **kwargs})
