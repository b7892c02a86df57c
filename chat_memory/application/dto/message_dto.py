"""
Data Transfer Object для сообщений.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...domain.entities import Message


class MessageDTO(BaseModel):
    """
    DTO сообщения для внешнего API.
    
    Атрибуты:
        role: Роль отправителя (system, user, assistant)
        content: Текст сообщения
        timestamp: Время создания (ISO 8601)
        model: Модель-автор ответа (None для сообщений пользователя)
    
    Пример:
        >>> dto = MessageDTO.from_entity(message)
        >>> dto.model_dump()
        {'role': 'user', 'content': 'Hi', 'timestamp': '...', 'model': None}
    """
    
    model_config = ConfigDict(protected_namespaces=())
    
    role: str = Field(description="Роль отправителя")
    content: str = Field(description="Текст сообщения")
    timestamp: str = Field(description="Время создания")
    model: Optional[str] = Field(default=None, description="Модель-автор ответа")
    
    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        return cls(
            role=message.role.value,
            content=message.content,
            timestamp=message.created_at.isoformat(),
            model=message.model_name
        )
    
    @classmethod
    def summary_entry(cls, summary: str) -> "MessageDTO":
        """Служебная запись с резюме для выдачи истории"""
        return cls(
            role="system",
            content=f"Past conversation summary: {summary}",
            timestamp="summary",
            model="system"
        )
