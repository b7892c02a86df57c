"""
Доменная сущность Message (Сообщение).

Представляет сообщение в диалоге между пользователем и LLM.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import Entity


class MessageRole(str, Enum):
    """
    Роль отправителя сообщения.
    
    Закрытое перечисление: других ролей в истории быть не может.
    """
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(Entity):
    """
    Доменная сущность сообщения.
    
    Атрибуты:
        conversation_id: ID conversation-владельца
        role: Роль отправителя
        content: Текстовое содержимое
        model_name: Модель, сгенерировавшая ответ (только для assistant)
    
    Пример:
        >>> msg = Message(role=MessageRole.USER, content="Привет!")
        >>> msg.is_user_message()
        True
    """
    
    conversation_id: Optional[int] = Field(
        default=None,
        description="ID conversation-владельца"
    )
    
    role: MessageRole = Field(
        ...,
        description="Роль отправителя сообщения"
    )
    
    content: str = Field(
        ...,
        description="Текстовое содержимое сообщения"
    )
    
    model_name: Optional[str] = Field(
        default=None,
        description="Модель, сгенерировавшая ответ"
    )
    
    def is_user_message(self) -> bool:
        return self.role == MessageRole.USER
