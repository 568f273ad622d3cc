import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Logger:
    """
    Named logger under the ``shiftly`` namespace, writing to stdout.

    The level comes from the LOG_LEVEL environment variable (default INFO).
    """

    def __init__(self, name: str = __name__):
        self._logger = logging.getLogger(f"shiftly.{name}")
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            self._logger.addHandler(handler)
            self._logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
            self._logger.propagate = False

    def debug(self, msg: str, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        """Log at ERROR with the active traceback attached."""
        self._logger.exception(msg, *args, **kwargs)
