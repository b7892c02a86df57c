"""
Application Services.
"""

from .conversation_service import ConversationService
from .chat_service import ChatService

__all__ = [
    "ConversationService",
    "ChatService",
]
