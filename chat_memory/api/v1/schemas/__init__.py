"""
API схемы (Pydantic модели запросов и ответов).
"""

from .health_schemas import HealthResponse
from .chat_schemas import ErrorResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
]
