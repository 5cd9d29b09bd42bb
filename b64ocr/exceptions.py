"""
Ошибки обработки запроса.

Каждая ошибка несёт HTTP статус, с которым она уходит клиенту.
Всё, что не является наследником OCRServiceError, считается
непредвиденным сбоем и отдаётся с кодом 500.
"""


class OCRServiceError(Exception):
    """Базовая ошибка сервиса"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthError(OCRServiceError):
    """Неверный или отсутствующий API ключ"""

    status_code = 403

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class ValidationError(OCRServiceError):
    """Некорректное тело запроса: JSON, поля, base64"""

    status_code = 400


class EngineError(OCRServiceError):
    """Tesseract не смог распознать присланные данные"""

    status_code = 400


class PayloadTooLargeError(OCRServiceError):
    """Тело запроса больше OCR_MAX_REQUEST_SIZE_MB"""

    status_code = 413
