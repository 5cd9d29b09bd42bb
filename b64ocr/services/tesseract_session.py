"""
Сессия Tesseract — одна на запрос.

Сессия настраивается (языки, PSM, whitelist), получает ровно одно
изображение, один раз отдаёт текст и закрывается. Между запросами
сессии не переиспользуются.

Глобальная инициализация движка (путь к бинарнику, проверка версии)
выполняется один раз при старте через configure_engine().
"""

import io
import logging
import shlex
from typing import Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from b64ocr.exceptions import EngineError
from b64ocr.schemas import DEFAULT_LANGUAGES

logger = logging.getLogger(__name__)


def configure_engine(tesseract_cmd: str = "") -> str:
    """
    Глобальная настройка pytesseract. Вызывается до обработки запросов.

    Args:
        tesseract_cmd: путь к бинарнику tesseract (пусто — искать в PATH)

    Returns:
        str: версия Tesseract

    Raises:
        pytesseract.TesseractNotFoundError: бинарник не найден
    """
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    version = str(pytesseract.get_tesseract_version())
    logger.info(f"Tesseract {version} готов к работе")
    return version


class TesseractSession:
    """
    Одноразовая сессия распознавания.

    Использование:
        with TesseractSession() as session:
            session.set_languages(["eng", "fra"])
            session.set_image_from_bytes(data)
            text = session.text()
    """

    def __init__(self):
        self.languages: list[str] = list(DEFAULT_LANGUAGES)
        self.page_seg_mode: Optional[int] = None
        self.whitelist: str = ""
        self._image_bytes: Optional[bytes] = None
        self._image: Optional[Image.Image] = None
        self._closed = False

    def set_page_seg_mode(self, psm: int) -> None:
        self.page_seg_mode = psm

    def set_languages(self, languages: list[str]) -> None:
        self.languages = list(languages)

    def set_whitelist(self, whitelist: str) -> None:
        self.whitelist = whitelist

    def set_image_from_bytes(self, data: bytes) -> None:
        self._image_bytes = data

    def build_config(self) -> str:
        """
        Собирает строку config для pytesseract.

        Returns:
            str: например "--psm 6 -c tessedit_char_whitelist=0123456789"
        """
        parts = []
        if self.page_seg_mode is not None:
            parts.append(f"--psm {self.page_seg_mode}")
        if self.whitelist:
            # pytesseract разбирает config через shlex.split
            parts.append("-c " + shlex.quote(f"tessedit_char_whitelist={self.whitelist}"))
        return " ".join(parts)

    def text(self) -> str:
        """
        Распознаёт текст на изображении.

        Returns:
            str: распознанный текст как есть (без обрезки)

        Raises:
            EngineError: изображение не читается или Tesseract вернул ошибку
        """
        if self._closed:
            raise RuntimeError("session is closed")
        if self._image_bytes is None:
            raise EngineError("image is not set")

        try:
            self._image = Image.open(io.BytesIO(self._image_bytes))
            self._image.load()
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
            # OSError — битые/обрезанные файлы
            raise EngineError(str(e)) from e

        # ICO, TGA, PCX и т.п. Pillow открывает, а pytesseract не принимает
        if self._image.format not in pytesseract.pytesseract.SUPPORTED_FORMATS:
            raise EngineError(f"Unsupported image format/type: {self._image.format}")

        try:
            return pytesseract.image_to_string(
                self._image,
                lang="+".join(self.languages),
                config=self.build_config(),
            )
        except pytesseract.TesseractError as e:
            raise EngineError(str(e.message).strip()) from e

    def close(self) -> None:
        """Освобождает изображение. Повторный вызов ничего не делает."""
        if self._closed:
            return
        self._closed = True
        self._image_bytes = None
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "TesseractSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
