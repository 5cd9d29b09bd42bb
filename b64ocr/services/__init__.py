"""
Сервисы OCR обработки.

Модули:
    - tesseract_session: одноразовая сессия Tesseract
    - ocr_engine: адаптер движка (сессия на вызов)
    - pipeline: обработка запроса POST /base64
"""

from b64ocr.services.ocr_engine import OCREngine
from b64ocr.services.pipeline import OCRPipeline
from b64ocr.services.tesseract_session import TesseractSession, configure_engine

__all__ = [
    "OCREngine",
    "OCRPipeline",
    "TesseractSession",
    "configure_engine",
]
