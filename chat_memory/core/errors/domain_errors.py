"""
Доменные исключения.

Исключения для ошибок бизнес-логики и нарушения бизнес-правил.
"""

from typing import Optional, Dict, Any, Iterable
from .base import DomainError


class ConflictExhaustedError(DomainError):
    """
    Исключение: не удалось получить или создать conversation.
    
    Выбрасывается SessionResolver, когда после конфликта уникальности
    строка так и не стала видна за отведенное число попыток.
    Ошибка фатальна для текущего запроса.
    
    Пример:
        >>> raise ConflictExhaustedError("session-123", attempts=3)
    """
    
    def __init__(
        self,
        session_id: str,
        attempts: int,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            session_id: Session id, для которого шло разрешение
            attempts: Количество сделанных попыток
            details: Дополнительные детали
        """
        message = (
            f"Failed to create or find conversation for session '{session_id}' "
            f"after {attempts} attempts"
        )
        super().__init__(
            message=message,
            details={"session_id": session_id, "attempts": attempts, **(details or {})},
            error_code="CONFLICT_EXHAUSTED"
        )


class MessageValidationError(DomainError):
    """
    Исключение: ошибка валидации сообщения.
    
    Пример:
        >>> raise MessageValidationError(field="content", reason="Message is empty")
    """
    
    def __init__(
        self,
        field: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None
    ):
        message = f"Validation failed for field '{field}': {reason}"
        super().__init__(
            message=message,
            details={"field": field, "reason": reason, **(details or {})},
            error_code="MESSAGE_VALIDATION_ERROR"
        )


class UnsupportedModelError(DomainError):
    """
    Исключение: запрошен неизвестный alias модели.
    
    Пример:
        >>> raise UnsupportedModelError("gpt-9", available=["deepseek", "grok"])
    """
    
    def __init__(
        self,
        model: str,
        available: Iterable[str],
        details: Optional[Dict[str, Any]] = None
    ):
        available = list(available)
        message = f"Unsupported model: {model}. Available: {', '.join(available)}"
        super().__init__(
            message=message,
            details={"model": model, "available": available, **(details or {})},
            error_code="UNSUPPORTED_MODEL"
        )
