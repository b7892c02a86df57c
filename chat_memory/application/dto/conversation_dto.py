"""
Data Transfer Objects для conversations.

Поля сериализуются в camelCase (sessionId, createdAt, ...).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.entities import Conversation, Message, MessageRole
from .message_dto import MessageDTO

TITLE_MAX_LENGTH = 50
DEFAULT_TITLE = "New Conversation"


def build_title(messages: List[Message]) -> str:
    """
    Заголовок: первое сообщение пользователя (или первое сообщение),
    обрезанное до TITLE_MAX_LENGTH символов.
    """
    if not messages:
        return DEFAULT_TITLE

    first = next((msg for msg in messages if msg.role == MessageRole.USER), messages[0])
    if len(first.content) > TITLE_MAX_LENGTH:
        return first.content[:TITLE_MAX_LENGTH] + "..."
    return first.content


def distinct_models(messages: List[Message]) -> List[str]:
    """Модели ответов в порядке первого появления"""
    models: List[str] = []
    for msg in messages:
        if msg.model_name and msg.model_name not in models:
            models.append(msg.model_name)
    return models


class ConversationSummary(BaseModel):
    """
    Краткая информация о conversation для списка.
    
    Атрибуты:
        session_id: Session id
        created_at: Время создания (ISO 8601)
        message_count: Количество сообщений
        has_summary: Есть ли непустое резюме
        title: Заголовок
        last_message_at: Время последнего сообщения
        models: Модели, отвечавшие в conversation
    """
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    
    session_id: str
    created_at: str
    message_count: int
    has_summary: bool
    title: str
    last_message_at: Optional[str] = None
    models: List[str] = Field(default_factory=list)
    
    @classmethod
    def from_entity(
        cls,
        conversation: Conversation,
        messages: List[Message]
    ) -> "ConversationSummary":
        last_message_at = None
        if messages:
            last = max(messages, key=lambda msg: (msg.created_at, msg.id or 0))
            last_message_at = last.created_at.isoformat()
        
        return cls(
            session_id=conversation.session_id,
            created_at=conversation.created_at.isoformat(),
            message_count=len(messages),
            has_summary=conversation.has_summary(),
            title=build_title(messages),
            last_message_at=last_message_at,
            models=distinct_models(messages)
        )


class ConversationDetails(ConversationSummary):
    """
    Полная информация о conversation: сводка + резюме + сообщения.
    """
    
    summary: Optional[str] = None
    messages: List[MessageDTO] = Field(default_factory=list)
    
    @classmethod
    def from_entity(
        cls,
        conversation: Conversation,
        messages: List[Message]
    ) -> "ConversationDetails":
        base = ConversationSummary.from_entity(conversation, messages)
        return cls(
            **base.model_dump(),
            summary=conversation.summary,
            messages=[MessageDTO.from_entity(msg) for msg in messages]
        )
