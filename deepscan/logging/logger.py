import logging
import sys


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("deepscan")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str) -> None:
        """Log an info message."""
        cls._logger.info(message)

    @classmethod
    def error(cls, message: str) -> None:
        """Log an error message."""
        cls._logger.error(message)

    @classmethod
    def warning(cls, message: str) -> None:
        """Log a warning message."""
        cls._logger.warning(message)

    @classmethod
    def debug(cls, message: str) -> None:
        """Log a debug message."""
        cls._logger.debug(message)

    @classmethod
    def exception(cls, message: str) -> None:
        """Log an error message with the active exception's traceback."""
        cls._logger.exception(message)
