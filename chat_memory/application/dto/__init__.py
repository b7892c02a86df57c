"""
Data Transfer Objects.
"""

from .message_dto import MessageDTO
from .conversation_dto import ConversationSummary, ConversationDetails
from .chat_dto import SingleModelAnswer, ModelReplyDTO, ComparisonAnswer

__all__ = [
    "MessageDTO",
    "ConversationSummary",
    "ConversationDetails",
    "SingleModelAnswer",
    "ModelReplyDTO",
    "ComparisonAnswer",
]
