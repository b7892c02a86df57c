"""
Доменная сущность Conversation.

Долговременная запись одного диалога: session id и
сжатое резюме ранней истории. Сообщения хранятся отдельно
и принадлежат conversation эксклюзивно.
"""

from typing import Optional

from pydantic import Field

from .base import Entity


class Conversation(Entity):
    """
    Conversation Entity.
    
    Атрибуты:
        session_id: Логический ключ (предполагается уникальным)
        summary: Резюме ранней истории (None до первого сжатия)
    
    Пример:
        >>> conv = Conversation(id=1, session_id="session-123")
        >>> conv.has_summary()
        False
    """
    
    session_id: str = Field(
        ...,
        min_length=1,
        description="Session id, под которым клиент ведет диалог"
    )
    
    summary: Optional[str] = Field(
        default=None,
        description="Резюме ранней истории"
    )
    
    def has_summary(self) -> bool:
        """Есть ли непустое резюме"""
        return bool(self.summary and self.summary.strip())
