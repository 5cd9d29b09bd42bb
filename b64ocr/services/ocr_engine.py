"""
Адаптер OCR движка.

На каждый вызов создаётся новая сессия Tesseract, настраивается
параметрами запроса, получает изображение и отдаёт текст.
Сессия закрывается на любом пути выхода; ошибка закрытия только
логируется и не подменяет результат.
"""

import logging
from typing import Callable, Optional

from b64ocr.schemas import DEFAULT_LANGUAGES
from b64ocr.services.tesseract_session import TesseractSession

logger = logging.getLogger(__name__)


class OCREngine:
    """
    Обёртка над сессиями Tesseract.

    Args:
        session_factory: фабрика сессий (в тестах — подставной класс)
    """

    def __init__(self, session_factory: Optional[Callable[[], TesseractSession]] = None):
        self._session_factory = session_factory or TesseractSession

    def invoke(
        self,
        image_bytes: bytes,
        languages: Optional[list[str]] = None,
        psm: int = 0,
        whitelist: str = "",
    ) -> str:
        """
        Распознаёт текст на одном изображении.

        Args:
            image_bytes: декодированное изображение
            languages: коды языков по порядку (пусто — ["eng"])
            psm: page segmentation mode, задаётся только если > 0
            whitelist: допустимые символы (пусто — без ограничения)

        Returns:
            str: распознанный текст

        Raises:
            EngineError: Tesseract не смог обработать изображение
        """
        session = self._session_factory()
        try:
            if psm > 0:
                session.set_page_seg_mode(psm)
            session.set_languages(languages or DEFAULT_LANGUAGES)
            session.set_image_from_bytes(image_bytes)
            if whitelist:
                session.set_whitelist(whitelist)
            return session.text()
        finally:
            self._release(session)

    @staticmethod
    def _release(session: TesseractSession) -> None:
        try:
            session.close()
        except Exception as e:
            logger.warning(f"Не удалось закрыть сессию Tesseract: {e}")
