"""Logging for the metastrip client.

Everything logs through ``Log`` under the ``metastrip`` logger. Records go
to stderr because the interactive shell renders its tables and prompts on
stdout.
"""

import logging
import sys


class Log:
    """Shared logger for selection, persistence and remote-call events."""

    _logger: logging.Logger = logging.getLogger("metastrip")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Apply ``log_level`` and attach the stderr handler on first use."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
