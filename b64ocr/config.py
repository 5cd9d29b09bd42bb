"""
Конфигурация OCR сервиса.

Все значения читаются из переменных окружения (или .env файла)
с префиксом OCR_. Читается один раз при старте, дальше только чтение.

Ключи:
    OCR_APIKEY — статический ключ, сверяется с заголовком Diggernauth
    OCR_SSL_CERT / OCR_PRIVATE_KEY — TLS включается только если заданы оба
    OCR_SERVICE_BIND_IP / OCR_SERVICE_BIND_PORT — адрес и порт сервера
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Настройки OCR сервиса.

    Экземпляр неизменяемый: создаётся при старте и передаётся
    в обработчики запросов по ссылке.
    """

    model_config = SettingsConfigDict(
        env_prefix="OCR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Авторизация ---
    # Пустой ключ — ни один запрос не пройдёт проверку
    apikey: str = ""

    # --- Сервер ---
    service_bind_ip: str = "0.0.0.0"
    service_bind_port: int = 8080
    ssl_cert: str = ""
    private_key: str = ""

    # --- Лимиты ---
    # 0 — без ограничения размера тела запроса
    max_request_size_mb: int = 0

    # --- Tesseract ---
    # Путь к бинарнику tesseract, если он не в PATH
    tesseract_cmd: str = ""

    # --- Логи ---
    # Пустая строка — только stderr
    log_file: str = "/var/log/ocrservice.log"
    log_max_size_mb: int = 100
    log_backups: int = 3
    log_max_age_days: int = 7
    log_level: str = "INFO"

    @property
    def tls_enabled(self) -> bool:
        return bool(self.ssl_cert and self.private_key)

    @property
    def max_request_size_bytes(self) -> int:
        return self.max_request_size_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Возвращает настройки процесса (читаются один раз)."""
    return Settings()
