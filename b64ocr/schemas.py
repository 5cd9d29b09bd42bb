"""
Схемы данных OCR сервиса.

Включает:
    - Тело запроса POST /base64
    - Конверты ответа (успех / ошибка)
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

DEFAULT_LANGUAGES = ["eng"]


class OCRRequest(BaseModel):
    """
    Запрос на распознавание.

    Обязательно только поле base64, остальные — подсказки для Tesseract.
    null в любом поле трактуется как отсутствие значения.

    Attributes:
        base64: изображение в стандартном base64 (RFC 4648, с паддингом)
        trim: символы, срезаемые с обоих концов результата
        languages: языки через запятую ("eng,fra"), по умолчанию "eng"
        whitelist: допустимые символы для распознавания
        psm: page segmentation mode Tesseract (0 — по умолчанию движка)
    """

    model_config = ConfigDict(extra="ignore")

    base64: str = ""
    trim: str = ""
    languages: str = ""
    whitelist: str = ""
    psm: StrictInt = Field(default=0, description="Tesseract --psm, <= 0 — не задавать")

    @field_validator("base64", "trim", "languages", "whitelist", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("psm", mode="before")
    @classmethod
    def _null_as_zero(cls, value):
        return 0 if value is None else value

    def language_list(self) -> list[str]:
        """
        Список языков для Tesseract.

        Коды не проверяются: "eng,,fra" даёт ["eng", "", "fra"],
        решение о валидности принимает движок.
        """
        if not self.languages:
            return list(DEFAULT_LANGUAGES)
        return self.languages.split(",")


class SuccessEnvelope(BaseModel):
    """Успешный ответ: {"status": "success", "result": "..."}"""

    status: Literal["success"] = "success"
    result: str


class FailureEnvelope(BaseModel):
    """Ответ с ошибкой: {"status": "failure", "error": "..."}"""

    status: Literal["failure"] = "failure"
    error: str


Envelope = SuccessEnvelope | FailureEnvelope
