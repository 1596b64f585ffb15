"""
clipstash.logger

Logging configuration: a JSON lines file handler plus an optional plain-text console
handler, with daily archiving of the log file.
"""

from datetime import datetime
import logging
from logging import Logger as T_Logger
from logging.config import dictConfig
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter  # type: ignore # noqa F401

from clipstash.config import LogSettings

LOGGER_NAME = "clipstash"
LOG_FILE_NAME = "clipstash.jsonl"

logger: T_Logger = logging.getLogger(LOGGER_NAME)
system_logger = logger.getChild("SYSTEM")


def build_config(settings: LogSettings, console: bool = True) -> dict:
    """Build the dictConfig mapping for `settings`."""
    log_file_path = Path(settings.log_dir) / LOG_FILE_NAME
    log_level = settings.log_level.upper()
    handlers = ["file", "console"] if console else ["file"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_file_path),
                "formatter": "json",
                "level": log_level,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": handlers,
                "level": log_level,
                "propagate": False,
            },
        },
    }
    if console:
        config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": log_level,
            "stream": "ext://sys.stderr",
        }
    return config


def setup_logging(
    settings: LogSettings, console: bool = True, archive: bool = True
) -> T_Logger:
    """
    Configure the clipstash logger.

    Args:
        settings (LogSettings): Level, directory and archive retention.
        console (bool): Also log to stderr. The browser passes False so log lines never
            draw over the terminal UI.
        archive (bool): Rotate the daily log and prune old archives first. Only the
            daemon passes True; other commands append to the file it has open.
    """
    log_file_path = Path(settings.log_dir) / LOG_FILE_NAME
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    if archive:
        _archive_daily_log_file(log_file_path)
        _manage_logfile_archives(log_file_path, settings.archive_days)

    dictConfig(build_config(settings, console=console))
    system_logger.debug(f"Logger for {LOGGER_NAME} initialized.")
    return logger


def _archive_daily_log_file(log_file_path: Path, now: datetime = None) -> None:
    """Archive the log file by renaming it with a timestamp, at most once per 24 hours."""
    current_time = now or datetime.now()
    archive_files = sorted(
        log_file_path.parent.glob(f"{log_file_path.stem}_*.jsonl"),
        key=lambda f: f.stat().st_mtime,
        reverse=True,
    )
    if archive_files:
        latest_archive = archive_files[0]
        timestamp_str = latest_archive.stem.replace(f"{log_file_path.stem}_", "")
        try:
            timestamp = datetime.strptime(timestamp_str, "%Y%m%d_%H%M%S")
        except ValueError:
            system_logger.warning(
                f"Could not parse timestamp from archive file {latest_archive}, skipping archive."
            )
            return
        if (current_time - timestamp).total_seconds() < 24 * 3600:
            return

    if log_file_path.exists() and log_file_path.stat().st_size > 0:
        timestamp = current_time.strftime("%Y%m%d_%H%M%S")
        archive_path = log_file_path.with_name(f"{log_file_path.stem}_{timestamp}.jsonl")
        log_file_path.rename(archive_path)


def _manage_logfile_archives(log_file_path: Path, days_to_keep: int = 10) -> None:
    """Keep only the most recent `days_to_keep` archives."""
    archive_files = sorted(
        log_file_path.parent.glob(f"{log_file_path.stem}_*.jsonl"),
        key=lambda f: f.stat().st_mtime,
        reverse=True,
    )
    for archive_file in archive_files[days_to_keep:]:
        archive_file.unlink()
