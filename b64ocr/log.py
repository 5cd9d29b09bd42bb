"""
Настройка логирования OCR сервиса.

Логи пишутся в ротируемый файл (ограничение по размеру и возрасту
резервных копий) и дублируются в stderr.
"""

import logging
import os
import time
from logging.handlers import RotatingFileHandler
from typing import Optional

from b64ocr.config import Settings

LOG_FORMAT = "%(asctime)s [OCR-Service] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class AgedRotatingFileHandler(RotatingFileHandler):
    """
    RotatingFileHandler, который при ротации ещё и удаляет
    резервные копии старше max_age_days.

    Args:
        filename: путь к лог-файлу
        max_bytes: размер файла, после которого происходит ротация
        backup_count: сколько резервных копий хранить
        max_age_days: максимальный возраст копии в днях (0 — не ограничен)
    """

    def __init__(
        self,
        filename: str,
        max_bytes: int,
        backup_count: int,
        max_age_days: int = 0,
    ):
        super().__init__(
            filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        self.max_age_days = max_age_days

    def doRollover(self) -> None:
        super().doRollover()
        self.remove_expired_backups()

    def remove_expired_backups(self, now: Optional[float] = None) -> list[str]:
        """
        Удаляет резервные копии старше max_age_days.

        Returns:
            list[str]: пути удалённых файлов
        """
        if self.max_age_days <= 0:
            return []

        now = now if now is not None else time.time()
        cutoff = now - self.max_age_days * 24 * 3600
        removed = []
        for i in range(1, self.backupCount + 1):
            path = f"{self.baseFilename}.{i}"
            try:
                if os.path.getmtime(path) < cutoff:
                    os.remove(path)
                    removed.append(path)
            except FileNotFoundError:
                continue
        return removed


def configure_logging(settings: Settings) -> None:
    """
    Настраивает корневой логгер. Вызывается один раз при старте.

    Args:
        settings: настройки сервиса (log_file, log_max_size_mb, ...)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.log_file:
        handlers.append(
            AgedRotatingFileHandler(
                settings.log_file,
                max_bytes=settings.log_max_size_mb * 1024 * 1024,
                backup_count=settings.log_backups,
                max_age_days=settings.log_max_age_days,
            )
        )

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
