"""
Пайплайн обработки запроса POST /base64.

Этапы:
    1. Проверка API ключа (заголовок Diggernauth)
    2. Разбор JSON и проверка полей
    3. Декодирование base64
    4. Распознавание через OCREngine
    5. Обрезка результата и формирование конверта

Ожидаемые ошибки (OCRServiceError) превращаются в конверт с ошибкой
на месте. Всё остальное перехватывает защитная обёртка в handle()
и отдаёт 500 — процесс при этом продолжает обслуживать запросы.
"""

import binascii
import json
import logging
import secrets
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from b64ocr.config import Settings
from b64ocr.exceptions import (
    AuthError,
    OCRServiceError,
    PayloadTooLargeError,
    ValidationError,
)
from b64ocr.schemas import Envelope, FailureEnvelope, OCRRequest, SuccessEnvelope
from b64ocr.services.ocr_engine import OCREngine

logger = logging.getLogger(__name__)


def check_api_key(provided: Optional[str], expected: str) -> None:
    """
    Сверяет ключ из заголовка с ключом из конфигурации.

    Сравнение побайтовое и регистрозависимое. Пустой ключ
    в конфигурации не пропускает никого.

    Starlette декодирует значения заголовков как latin-1, поэтому
    исходные байты заголовка восстанавливаются через encode("latin-1")
    и сравниваются с UTF-8 байтами ключа из конфигурации.

    Raises:
        AuthError: ключ отсутствует или не совпадает
    """
    if not provided or not expected:
        raise AuthError()
    try:
        provided_bytes = provided.encode("latin-1")
    except UnicodeEncodeError:
        # Заголовок из сети всегда кодируется в latin-1
        raise AuthError() from None
    if not secrets.compare_digest(provided_bytes, expected.encode("utf-8")):
        raise AuthError()


def parse_payload(body: bytes) -> OCRRequest:
    """
    Разбирает тело запроса.

    Args:
        body: сырое тело запроса

    Returns:
        OCRRequest: проверенный запрос с непустым base64

    Raises:
        ValidationError: некорректный JSON, типы полей или пустой base64
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        # JSONDecodeError и UnicodeDecodeError — оба ValueError
        raise ValidationError(str(e)) from e

    try:
        request = OCRRequest.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_format_validation_error(e)) from e

    if not request.base64:
        raise ValidationError("base64 string required")
    return request


def decode_image(data: str) -> bytes:
    """
    Декодирует стандартный base64 (RFC 4648, с паддингом).

    Переводы строк пропускаются. Строгий режим binascii: посторонние символы,
    лишний или недостающий паддинг и данные после паддинга — ошибка.

    Raises:
        ValidationError: текст ошибки декодера
    """
    data = data.replace("\r", "").replace("\n", "")
    try:
        return binascii.a2b_base64(data, strict_mode=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(str(e)) from e


def shape_result(text: str, trim: str) -> str:
    """Срезает с обоих концов любые символы из trim (как набор, не как префикс)."""
    if not trim:
        return text
    return text.strip(trim)


def describe(fault: BaseException) -> str:
    """Строковое описание непредвиденного сбоя для ответа клиенту."""
    return str(fault) or type(fault).__name__


def _format_validation_error(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"])
        parts.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return "; ".join(parts)


class OCRPipeline:
    """
    Обработчик одного запроса.

    Экземпляр общий для всех запросов, но состояния между ними
    не хранит: настройки только читаются, сессия Tesseract
    создаётся на каждый вызов.
    """

    def __init__(self, settings: Settings, engine: Optional[OCREngine] = None):
        self.settings = settings
        self.engine = engine or OCREngine()

    def handle(self, api_key: Optional[str], body: bytes) -> tuple[int, Envelope]:
        """
        Выполняет запрос целиком под защитной обёрткой.

        Args:
            api_key: значение заголовка Diggernauth (None — нет заголовка)
            body: сырое тело запроса

        Returns:
            tuple: (HTTP статус, конверт ответа)
        """
        try:
            return 200, self._process(api_key, body)
        except OCRServiceError as e:
            logger.warning(f"Запрос отклонён ({e.status_code}): {e.message}")
            return e.status_code, FailureEnvelope(error=e.message)
        except Exception as e:
            logger.exception(f"Непредвиденная ошибка обработки запроса: {e!r}")
            return 500, FailureEnvelope(error=describe(e))

    def _process(self, api_key: Optional[str], body: bytes) -> SuccessEnvelope:
        check_api_key(api_key, self.settings.apikey)

        limit = self.settings.max_request_size_bytes
        if limit and len(body) > limit:
            raise PayloadTooLargeError(
                f"request body too large: {len(body)} bytes, "
                f"limit {self.settings.max_request_size_mb} MB"
            )

        request = parse_payload(body)
        image_bytes = decode_image(request.base64)

        text = self.engine.invoke(
            image_bytes,
            languages=request.language_list(),
            psm=request.psm,
            whitelist=request.whitelist,
        )
        result = shape_result(text, request.trim)
        logger.info(
            f"Распознано: изображение {len(image_bytes)} байт, "
            f"языки {request.language_list()}, текст {len(result)} символов"
        )
        return SuccessEnvelope(result=result)
