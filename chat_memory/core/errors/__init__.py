"""
Кастомные исключения для Chat Memory Service.

Этот модуль содержит иерархию исключений для различных
ошибочных ситуаций в системе.
"""

from .base import (
    ChatMemoryError,
    DomainError,
    InfrastructureError
)

from .domain_errors import (
    ConflictExhaustedError,
    MessageValidationError,
    UnsupportedModelError
)

from .infrastructure_errors import (
    RepositoryError,
    DuplicateSessionError,
    DatabaseError,
    ModelCallError
)

__all__ = [
    # Базовые исключения
    "ChatMemoryError",
    "DomainError",
    "InfrastructureError",
    
    # Доменные исключения
    "ConflictExhaustedError",
    "MessageValidationError",
    "UnsupportedModelError",
    
    # Инфраструктурные исключения
    "RepositoryError",
    "DuplicateSessionError",
    "DatabaseError",
    "ModelCallError",
]
