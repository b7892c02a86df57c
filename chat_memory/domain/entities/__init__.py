"""
Доменные сущности.
"""

from .base import Entity
from .message import Message, MessageRole
from .conversation import Conversation

__all__ = [
    "Entity",
    "Message",
    "MessageRole",
    "Conversation",
]
