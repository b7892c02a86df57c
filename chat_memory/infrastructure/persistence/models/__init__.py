"""
SQLAlchemy модели для персистентности.

Модели используются только в Infrastructure Layer.
"""

from .base import Base
from .conversation import ConversationModel, MessageModel

__all__ = [
    "Base",
    "ConversationModel",
    "MessageModel",
]
