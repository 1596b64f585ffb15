import json
import os
from datetime import datetime, timedelta
from pathlib import Path

from clipstash.config import LogSettings
from clipstash.logger import (
    LOG_FILE_NAME,
    _archive_daily_log_file,
    _manage_logfile_archives,
    build_config,
    setup_logging,
)


def test_build_config_handlers(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CLIPSTASH_LOG_DIR")
    settings = LogSettings(log_dir=tmp_path, log_level="warning")
    config = build_config(settings)
    assert set(config["handlers"]) == {"file", "console"}
    assert config["handlers"]["file"]["filename"] == str(tmp_path / LOG_FILE_NAME)
    assert config["loggers"]["clipstash"]["level"] == "WARNING"

    quiet = build_config(settings, console=False)
    assert set(quiet["handlers"]) == {"file"}
    assert quiet["loggers"]["clipstash"]["handlers"] == ["file"]


def test_setup_logging_writes_json_lines(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CLIPSTASH_LOG_DIR")
    settings = LogSettings(log_dir=tmp_path / "logs", log_level="info")
    logger = setup_logging(settings, console=False)
    logger.getChild("store").info("hello log")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / LOG_FILE_NAME).read_text().splitlines()
    record = json.loads(lines[-1])
    assert record["message"] == "hello log"
    assert record["name"] == "clipstash.store"
    assert record["levelname"] == "INFO"
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_archive_daily_log_file(tmp_path: Path):
    log_file = tmp_path / LOG_FILE_NAME
    log_file.write_text('{"message": "old"}\n')
    now = datetime(2024, 5, 1, 12, 0, 0)

    _archive_daily_log_file(log_file, now=now)
    archived = tmp_path / "clipstash_20240501_120000.jsonl"
    assert archived.exists()
    assert not log_file.exists()

    # A second run within 24 hours keeps the live file in place.
    log_file.write_text('{"message": "new"}\n')
    _archive_daily_log_file(log_file, now=now + timedelta(hours=1))
    assert log_file.exists()


def test_manage_logfile_archives_keeps_most_recent(tmp_path: Path):
    log_file = tmp_path / LOG_FILE_NAME
    for day in range(1, 6):
        archive = tmp_path / f"clipstash_202401{day:02d}_000000.jsonl"
        archive.write_text("{}\n")
        stamp = datetime(2024, 1, day).timestamp()
        os.utime(archive, (stamp, stamp))

    _manage_logfile_archives(log_file, days_to_keep=2)
    remaining = sorted(p.name for p in tmp_path.glob("clipstash_*.jsonl"))
    assert remaining == ["clipstash_20240104_000000.jsonl", "clipstash_20240105_000000.jsonl"]


def test_setup_logging_without_archive_leaves_live_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CLIPSTASH_LOG_DIR")
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    log_file = log_dir / LOG_FILE_NAME
    log_file.write_text('{"message": "written by the daemon"}\n')
    old = log_dir / "clipstash_20200101_000000.jsonl"
    old.write_text("{}\n")

    settings = LogSettings(log_dir=log_dir, archive_days=0)
    logger = setup_logging(settings, console=False, archive=False)
    assert log_file.exists()
    assert old.exists()
    assert sorted(p.name for p in log_dir.glob("clipstash_*.jsonl")) == [old.name]
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_with_archive_rotates_stale_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CLIPSTASH_LOG_DIR")
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    log_file = log_dir / LOG_FILE_NAME
    log_file.write_text('{"message": "yesterday"}\n')

    logger = setup_logging(LogSettings(log_dir=log_dir), console=False, archive=True)
    assert len(list(log_dir.glob("clipstash_*.jsonl"))) == 1
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
