import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "survivor_league.log"
DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"


def _league_file_handler(root_logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in root_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler) and Path(
            handler.baseFilename
        ).name == LOG_FILE_NAME:
            return handler
    return None


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> Path:
    """Configure logging for the Survivor fantasy league.

    Adds a rotating league log file plus a console handler to the root logger.
    Calling it again is a no-op and returns the file already in use.

    Returns:
        Path of the league log file.
    """
    root_logger = logging.getLogger()
    existing = _league_file_handler(root_logger)
    if existing is not None:
        return Path(existing.baseFilename)

    log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # 5MB per file, 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("League log at %s (level=%s)", log_file, log_level)
    return log_file
