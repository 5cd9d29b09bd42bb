"""
Pytest конфигурация для тестов OCR сервиса.

Фикстуры:
    - settings: настройки с известным API ключом, без лог-файла
    - sessions: подставные сессии Tesseract (бинарник не нужен)
    - engine / pipeline / client: собранные поверх подставных сессий
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from b64ocr.config import Settings
from b64ocr.main import create_app
from b64ocr.services.ocr_engine import OCREngine
from b64ocr.services.pipeline import OCRPipeline

API_KEY = "test-secret-key"


class FakeSession:
    """Подставная сессия: запоминает настройку и отдаёт заданный текст."""

    def __init__(self, recorder: "SessionRecorder"):
        self.recorder = recorder
        self.page_seg_mode: Optional[int] = None
        self.page_seg_mode_set = False
        self.languages: list[str] = ["eng"]
        self.whitelist = ""
        self.image_bytes: Optional[bytes] = None
        self.text_calls = 0
        self.closed = False

    def set_page_seg_mode(self, psm: int) -> None:
        self.page_seg_mode = psm
        self.page_seg_mode_set = True

    def set_languages(self, languages: list[str]) -> None:
        self.languages = list(languages)

    def set_whitelist(self, whitelist: str) -> None:
        self.whitelist = whitelist

    def set_image_from_bytes(self, data: bytes) -> None:
        self.image_bytes = data

    def text(self) -> str:
        self.text_calls += 1
        if self.recorder.error is not None:
            raise self.recorder.error
        if self.recorder.echo:
            return self.image_bytes.decode("utf-8")
        return self.recorder.text

    def close(self) -> None:
        self.closed = True
        if self.recorder.close_error is not None:
            raise self.recorder.close_error


class SessionRecorder:
    """Фабрика подставных сессий со списком всех созданных."""

    def __init__(self):
        self.sessions: list[FakeSession] = []
        self.text = "recognized text"
        self.echo = False
        self.error: Optional[BaseException] = None
        self.close_error: Optional[BaseException] = None

    def __call__(self) -> FakeSession:
        session = FakeSession(self)
        self.sessions.append(session)
        return session

    @property
    def last(self) -> FakeSession:
        return self.sessions[-1]


@pytest.fixture
def settings():
    """Настройки без .env и без лог-файла."""
    return Settings(_env_file=None, apikey=API_KEY, log_file="")


@pytest.fixture
def sessions():
    return SessionRecorder()


@pytest.fixture
def engine(sessions):
    return OCREngine(session_factory=sessions)


@pytest.fixture
def pipeline(settings, engine):
    return OCRPipeline(settings, engine)


@pytest.fixture
def client(settings, engine):
    """FastAPI test client (без lifespan — Tesseract не требуется)."""
    return TestClient(create_app(settings, engine))


@pytest.fixture
def auth_headers():
    return {"Diggernauth": API_KEY}
