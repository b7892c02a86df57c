"""
Repository interfaces доменного слоя.

Реализации находятся в infrastructure слое.
"""

from .conversation_repository import ConversationRepository

__all__ = ["ConversationRepository"]
