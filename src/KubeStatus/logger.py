import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import ClassVar, Optional
from typing_extensions import TypeAlias

from KubeStatus.config import AppConfig

# Type alias for Logger to make it available for import
Logger: TypeAlias = logging.Logger

LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"


def _log_level(config: AppConfig) -> int:
    return getattr(logging, config.log_level.upper(), logging.INFO)


def setup_logging(config: AppConfig, process_name: Optional[str] = None) -> Logger:
    """
    Configures and returns the main application logger.
    Used outside the TUI, where writing to stderr does not corrupt the screen.
    """
    logger = logging.getLogger("KubeStatus")

    # Prevent logs from propagating to the root logger if it has other handlers
    logger.propagate = False

    # Clear any existing handlers to prevent duplicate logging
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.setLevel(_log_level(config))

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(stream_handler)

    log_message = (
        f"--- KubeStatus {process_name} Logging Initialized ---"
        if process_name
        else "--- KubeStatus Logging Initialized ---"
    )
    logger.debug(log_message)
    return logger


class AppLogger:
    """Routes TUI log records through a queue into a log file.

    Without a configured log file records are dropped, since anything written
    to the terminal would corrupt the Textual display.
    """

    _instance: ClassVar["AppLogger | None"] = None

    @classmethod
    def get_instance(cls, config: AppConfig) -> "AppLogger":
        """Returns the singleton instance of the AppLogger."""
        if cls._instance is None:
            cls._instance = AppLogger(config)
        return cls._instance

    def __init__(self, config: AppConfig) -> None:
        self.log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
        self.log_listener: Optional[QueueListener] = None

        app_logger = logging.getLogger("KubeStatus")
        app_logger.propagate = False
        app_logger.handlers.clear()
        app_logger.setLevel(_log_level(config))

        if config.log_file:
            log_handler = logging.FileHandler(config.log_file, mode="w")
            log_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.log_listener = QueueListener(self.log_queue, log_handler)
            app_logger.addHandler(QueueHandler(self.log_queue))
            self.log_listener.start()
            app_logger.info("--- KubeStatus TUI Logger Initialized ---")
        else:
            app_logger.addHandler(logging.NullHandler())

    def stop(self) -> None:
        """Stop the log listener."""
        if self.log_listener:
            self.log_listener.stop()
            self.log_listener = None
        AppLogger._instance = None
