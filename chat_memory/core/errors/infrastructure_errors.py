"""
Инфраструктурные исключения.

Исключения для ошибок работы с внешними системами и инфраструктурой.
"""

from typing import Optional, Dict, Any
from .base import InfrastructureError


class RepositoryError(InfrastructureError):
    """
    Исключение: ошибка работы с репозиторием.
    
    Пример:
        >>> raise RepositoryError(
        ...     operation="add_message",
        ...     entity_type="Message",
        ...     reason="Database connection failed"
        ... )
    """
    
    def __init__(
        self,
        operation: str,
        entity_type: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            operation: Операция (create, add_message, delete и т.д.)
            entity_type: Тип сущности
            reason: Причина ошибки
            details: Дополнительные детали
        """
        message = (
            f"Repository error during '{operation}' "
            f"on {entity_type}: {reason}"
        )
        super().__init__(
            message=message,
            details={
                "operation": operation,
                "entity_type": entity_type,
                "reason": reason,
                **(details or {})
            },
            error_code="REPOSITORY_ERROR"
        )


class DuplicateSessionError(InfrastructureError):
    """
    Исключение: нарушение уникальности session_id при вставке.
    
    Транзиентный конфликт записи: другой запрос успел создать
    conversation с тем же session id. Обрабатывается SessionResolver.
    """
    
    def __init__(self, session_id: str, details: Optional[Dict[str, Any]] = None):
        message = f"Conversation with session '{session_id}' already exists"
        super().__init__(
            message=message,
            details={"session_id": session_id, **(details or {})},
            error_code="DUPLICATE_SESSION"
        )


class DatabaseError(InfrastructureError):
    """
    Исключение: ошибка работы с базой данных.
    
    Пример:
        >>> raise DatabaseError(operation="init", reason="Database not initialized")
    """
    
    def __init__(
        self,
        operation: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None
    ):
        message = f"Database error during '{operation}': {reason}"
        super().__init__(
            message=message,
            details={
                "operation": operation,
                "reason": reason,
                **(details or {})
            },
            error_code="DATABASE_ERROR"
        )


class ModelCallError(InfrastructureError):
    """
    Исключение: ошибка вызова LLM.
    
    Сетевые ошибки, HTTP статус ошибки, а также ответ без
    choices[0].message.content.
    
    Пример:
        >>> raise ModelCallError(
        ...     model="x-ai/grok-4-fast:free",
        ...     reason="Service unavailable",
        ...     status_code=503
        ... )
    """
    
    def __init__(
        self,
        model: str,
        reason: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        message = f"Model call to '{model}' failed: {reason}"
        if status_code:
            message += f" (status: {status_code})"
        
        super().__init__(
            message=message,
            details={
                "model": model,
                "reason": reason,
                "status_code": status_code,
                **(details or {})
            },
            error_code="MODEL_CALL_ERROR"
        )
        self.model = model
        self.reason = reason
        self.status_code = status_code
