"""Logging configuration for mdplay."""
import logging
from pathlib import Path
from typing import Optional

NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "watchfiles", "PIL")


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """
    Configure application logging.
    
    The terminal belongs to the slide renderer, so records are written to a
    file instead of stdout.
    
    Args:
        level: Logging level (default: INFO)
        log_file: Destination file; logging is disabled when None
    """
    if log_file is None:
        handlers: list[logging.Handler] = [logging.NullHandler()]
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

