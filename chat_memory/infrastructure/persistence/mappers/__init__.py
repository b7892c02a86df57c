"""
Мапперы для преобразования между доменными сущностями и моделями БД.
"""

from .conversation_mapper import ConversationMapper

__all__ = [
    "ConversationMapper",
]
