"""Logging setup for the tracker."""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure the root logger with a rich console handler.

    Args:
        level: Level name for the root logger.
        log_file: Optional path for a rotating file log.
    """
    root_logger = logging.getLogger()
    if any(isinstance(h, RichHandler) for h in root_logger.handlers):
        return

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = RichHandler(show_path=False, rich_tracebacks=True)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)
