"""
Logging configuration with daily file rotation and retention cleanup.
"""
import os
import logging
from logging.handlers import TimedRotatingFileHandler
from datetime import datetime, timedelta
from pathlib import Path

from config import Config


LOGS_DIR = Config.LOGS_DIR
LOG_FILE = os.path.join(LOGS_DIR, "studio.log")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER_NAME = "studio"


def cleanup_old_logs(directory: str, retention_days: int = Config.LOG_RETENTION_DAYS) -> int:
    """
    Remove rotated log files older than retention_days.

    Rotated files are named studio.log.YYYY-MM-DD; files whose suffix does not
    parse fall back to their modification time.

    Returns:
        Number of files deleted
    """
    log_dir = Path(directory)
    if not log_dir.exists():
        return 0

    cutoff = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0
    for log_file in log_dir.glob("studio.log.*"):
        if not log_file.is_file():
            continue
        try:
            stamp = datetime.strptime(log_file.name.replace("studio.log.", ""), "%Y-%m-%d")
        except ValueError:
            stamp = datetime.fromtimestamp(log_file.stat().st_mtime)
        if stamp >= cutoff:
            continue
        try:
            log_file.unlink()
            deleted_count += 1
        except OSError as e:
            logging.getLogger(ROOT_LOGGER_NAME).error(f"Failed to delete log file {log_file.name}: {e}")

    if deleted_count > 0:
        logging.getLogger(ROOT_LOGGER_NAME).info(f"Cleaned up {deleted_count} old log file(s)")
    return deleted_count


def setup_logger(name: str = ROOT_LOGGER_NAME, level: str = Config.LOG_LEVEL) -> logging.Logger:
    """
    Set up the studio logger with file rotation and console output.

    Args:
        name: Logger name
        level: Logging level name (default: Config.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    numeric_level = getattr(logging, level, logging.INFO)
    logger.setLevel(numeric_level)

    os.makedirs(LOGS_DIR, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        LOG_FILE,
        when="midnight",
        interval=1,
        backupCount=Config.LOG_RETENTION_DAYS,
        encoding="utf-8",
        utc=True
    )
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", "%H:%M:%S")
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    cleanup_old_logs(LOGS_DIR, Config.LOG_RETENTION_DAYS)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Dotted child name such as "batch.orchestrator" (None returns the root studio logger)

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


studio_logger = setup_logger()

studio_logger.info("=" * 80)
studio_logger.info("Studio logger initialized")
studio_logger.info(f"Log file: {LOG_FILE} (retention: {Config.LOG_RETENTION_DAYS} days)")
studio_logger.info("=" * 80)
