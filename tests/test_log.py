"""Тесты ротируемого лог-файла."""

import logging
import os
import time

from b64ocr.config import Settings
from b64ocr.log import AgedRotatingFileHandler, configure_logging


def test_rotates_by_size(tmp_path):
    path = tmp_path / "ocr.log"
    handler = AgedRotatingFileHandler(str(path), max_bytes=200, backup_count=2)
    logger = logging.getLogger("test_rotates_by_size")
    logger.propagate = False
    logger.addHandler(handler)
    try:
        for i in range(50):
            logger.warning("line %d %s", i, "x" * 20)
    finally:
        logger.removeHandler(handler)
        handler.close()

    assert path.exists()
    assert (tmp_path / "ocr.log.1").exists()
    assert (tmp_path / "ocr.log.2").exists()
    assert not (tmp_path / "ocr.log.3").exists()


def test_removes_expired_backups(tmp_path):
    path = tmp_path / "ocr.log"
    handler = AgedRotatingFileHandler(str(path), max_bytes=1024, backup_count=3, max_age_days=7)
    try:
        now = time.time()
        old = tmp_path / "ocr.log.2"
        fresh = tmp_path / "ocr.log.1"
        old.write_text("old")
        fresh.write_text("fresh")
        eight_days_ago = now - 8 * 24 * 3600
        os.utime(old, (eight_days_ago, eight_days_ago))

        removed = handler.remove_expired_backups(now=now)
    finally:
        handler.close()

    assert removed == [str(old)]
    assert not old.exists()
    assert fresh.exists()


def test_no_age_limit(tmp_path):
    path = tmp_path / "ocr.log"
    handler = AgedRotatingFileHandler(str(path), max_bytes=1024, backup_count=3, max_age_days=0)
    try:
        backup = tmp_path / "ocr.log.1"
        backup.write_text("old")
        os.utime(backup, (0, 0))
        assert handler.remove_expired_backups() == []
    finally:
        handler.close()
    assert backup.exists()


def test_configure_logging_writes_to_file(tmp_path):
    path = tmp_path / "service.log"
    settings = Settings(_env_file=None, log_file=str(path), log_level="info")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        configure_logging(settings)
        logging.getLogger("b64ocr.test").info("OCR web server started")
        for handler in root.handlers:
            handler.flush()
        assert "OCR web server started" in path.read_text(encoding="utf-8")
        assert "[OCR-Service]" in path.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
