"""
Реализации репозиториев (SQLAlchemy).
"""

from .conversation_repository_impl import ConversationRepositoryImpl

__all__ = [
    "ConversationRepositoryImpl",
]
