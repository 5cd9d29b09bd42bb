"""
OCR сервис — распознавание текста с изображений в base64.

Один эндпоинт POST /base64:
    - проверка статического API ключа
    - разбор JSON, декодирование base64
    - распознавание через Tesseract (отдельная сессия на запрос)
    - ответ в конверте {"status": ..., "result" | "error": ...}
"""

from b64ocr.config import Settings, get_settings
from b64ocr.schemas import FailureEnvelope, OCRRequest, SuccessEnvelope

__all__ = [
    "Settings",
    "get_settings",
    "OCRRequest",
    "SuccessEnvelope",
    "FailureEnvelope",
]
