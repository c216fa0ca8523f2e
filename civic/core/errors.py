# civic/core/errors.py
"""
Таксономия ошибок сервиса.

Их бросают сервисы и зависимости; ``civic.main`` превращает любой
``ServiceError`` в JSON ``{"message": ..., **extra}`` с его status_code.
"""
from typing import Any, Dict, Optional


class ServiceError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.extra: Dict[str, Any] = extra

    def body(self) -> Dict[str, Any]:
        return {"message": self.message, **self.extra}


class ValidationFailed(ServiceError):
    status_code = 400
    message = "Validation failed"


class Unauthenticated(ServiceError):
    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(Unauthenticated):
    message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    message = "Forbidden"


class NotFound(ServiceError):
    status_code = 404
    message = "Not found"

    def __init__(self, message: Optional[str] = None, id: Optional[str] = None):
        if id is None:
            super().__init__(message)
        else:
            super().__init__(message, id=id)


class Conflict(ServiceError):
    status_code = 409
    message = "Conflict"


class EmailInUse(Conflict):
    message = "Email already in use"


class DuplicateVote(Conflict):
    # POST /issues/{id}/vote отвечает 400, не 409
    status_code = 400
    message = "Already voted"


class StoreUnavailable(ServiceError):
    status_code = 500
    message = "Store unavailable"


class InvalidToken(Exception):
    """Неверная подпись, истёкший или битый токен. Наружу из auth-слоя не выходит."""
