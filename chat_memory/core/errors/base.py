"""
Базовые исключения для Chat Memory Service.

Определяет иерархию исключений для различных слоев приложения.
"""

from typing import Optional, Dict, Any


class ChatMemoryError(Exception):
    """
    Базовое исключение для всех ошибок сервиса.
    
    Все кастомные исключения наследуются от этого класса,
    что позволяет отлавливать любые ошибки приложения одним except.
    
    Атрибуты:
        message: Сообщение об ошибке
        details: Дополнительные детали ошибки
        error_code: Код ошибки для идентификации
    
    Пример:
        >>> try:
        ...     raise ChatMemoryError("Something went wrong")
        ... except ChatMemoryError as e:
        ...     print(f"Error: {e}")
    """
    
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        """
        Args:
            message: Сообщение об ошибке
            details: Дополнительные детали (опционально)
            error_code: Код ошибки (опционально)
        """
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Преобразовать исключение в словарь.
        
        Используется для логирования и API ответов.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
    
    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class DomainError(ChatMemoryError):
    """
    Базовое исключение для ошибок доменного слоя.
    
    Нарушения бизнес-правил и инвариантов.
    """
    pass


class InfrastructureError(ChatMemoryError):
    """
    Базовое исключение для ошибок инфраструктурного слоя.
    
    Ошибки работы с внешними системами: база данных, LLM провайдер, сеть.
    """
    pass
