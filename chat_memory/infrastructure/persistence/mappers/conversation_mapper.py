"""
Mapper для преобразования между Conversation/Message и моделями БД.

Изолирует доменный слой от деталей персистентности.
"""

from datetime import datetime, timezone
from typing import Optional

from ....domain.entities import Conversation, Message, MessageRole
from ..models import ConversationModel, MessageModel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite возвращает naive datetime
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ConversationMapper:
    """
    Mapper между доменными сущностями и моделями БД.
    
    Пример:
        >>> mapper = ConversationMapper()
        >>> conversation = mapper.to_entity(conversation_model)
        >>> message = mapper.message_to_entity(message_model)
    """
    
    def to_entity(self, model: ConversationModel) -> Conversation:
        """
        Преобразовать ConversationModel в доменную сущность.
        
        Сообщения не загружаются: история читается отдельным запросом.
        """
        return Conversation(
            id=model.id,
            session_id=model.session_id,
            summary=model.summary,
            created_at=_as_utc(model.created_at)
        )
    
    def message_to_entity(self, model: MessageModel) -> Message:
        """Преобразовать MessageModel в доменную сущность Message"""
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            role=MessageRole(model.role),
            content=model.content,
            model_name=model.model_name,
            created_at=_as_utc(model.created_at)
        )
    
    def message_to_model(self, message: Message) -> MessageModel:
        """Преобразовать Message в MessageModel для вставки"""
        return MessageModel(
            conversation_id=message.conversation_id,
            role=message.role.value,
            content=message.content,
            model_name=message.model_name,
            created_at=message.created_at
        )
