"""
OCR сервис — FastAPI приложение.

Принимает изображение в base64, распознаёт текст через Tesseract
и возвращает JSON конверт.

Эндпоинты:
    POST /base64 — распознавание изображения (заголовок Diggernauth обязателен)

Запуск:
    b64ocr-server
    python -m b64ocr.main
    uvicorn b64ocr.main:app --host 0.0.0.0 --port 8080
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from b64ocr.config import Settings, get_settings
from b64ocr.log import configure_logging
from b64ocr.services.ocr_engine import OCREngine
from b64ocr.services.pipeline import OCRPipeline
from b64ocr.services.tesseract_session import configure_engine

logger = logging.getLogger(__name__)

API_KEY_HEADER = "Diggernauth"
CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


class UnicodeJSONResponse(JSONResponse):
    """JSON ответ без \\uXXXX экранирования не-ASCII символов."""

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[OCREngine] = None,
) -> FastAPI:
    """
    Собирает приложение.

    Args:
        settings: настройки (по умолчанию — из окружения)
        engine: адаптер OCR (в тестах — с подставными сессиями)

    Returns:
        FastAPI: приложение с единственным маршрутом POST /base64
    """
    settings = settings or get_settings()
    pipeline = OCRPipeline(settings, engine)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # Глобальная настройка Tesseract — до первого запроса
        configure_engine(settings.tesseract_cmd)
        yield

    app = FastAPI(
        title="OCR Service",
        description="Распознавание текста с изображений в base64 (Tesseract OCR)",
        version="1.0.0",
        default_response_class=UnicodeJSONResponse,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    @app.post("/base64")
    async def recognize_base64(request: Request) -> UnicodeJSONResponse:
        """
        Распознаёт текст на изображении из тела запроса.

        Тело: {"base64": "...", "trim": "", "languages": "eng", "whitelist": "", "psm": 0}

        Returns:
            UnicodeJSONResponse: {"status": "success", "result": "..."}
            или {"status": "failure", "error": "..."} с кодом 403/400/413/500
        """
        body = await request.body()

        # Tesseract блокирует — уходим в threadpool, чтобы не держать event loop
        status_code, envelope = await run_in_threadpool(
            pipeline.handle,
            request.headers.get(API_KEY_HEADER),
            body,
        )
        return UnicodeJSONResponse(
            envelope.model_dump(),
            status_code=status_code,
            headers=CORS_HEADERS,
        )

    return app


app = create_app()


def run() -> None:
    """Точка входа: логирование, затем uvicorn (с TLS, если заданы сертификат и ключ)."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    logger.info("OCR web server started")
    logger.info(
        f"Адрес: {settings.service_bind_ip}:{settings.service_bind_port}, "
        f"TLS: {'да' if settings.tls_enabled else 'нет'}"
    )

    ssl_options = {}
    if settings.tls_enabled:
        ssl_options = {
            "ssl_certfile": settings.ssl_cert,
            "ssl_keyfile": settings.private_key,
        }

    # app собран при импорте с теми же get_settings()
    uvicorn.run(
        app,
        host=settings.service_bind_ip,
        port=settings.service_bind_port,
        log_config=None,
        **ssl_options,
    )


if __name__ == "__main__":
    run()
