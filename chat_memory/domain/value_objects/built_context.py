"""
Value Object результата сборки контекста.

Деградация (минимальный контекст вместо ошибки) видна в типе,
а не спрятана в обработчике исключений.
"""

from typing import List, Optional, Dict

from pydantic import BaseModel, ConfigDict, Field

from .context_message import ContextMessage


class BuiltContext(BaseModel):
    """
    Собранный контекст для вызова модели.
    
    Атрибуты:
        messages: Упорядоченные записи {role, content}
        compacted: Было ли выполнено сжатие истории при сборке
        degraded: Контекст собран по резервному пути после ошибки
        reason: Причина деградации
    """
    
    model_config = ConfigDict(frozen=True)
    
    messages: List[ContextMessage] = Field(default_factory=list)
    compacted: bool = False
    degraded: bool = False
    reason: Optional[str] = None
    
    @classmethod
    def degraded_to(cls, messages: List[ContextMessage], reason: str) -> "BuiltContext":
        return cls(messages=messages, degraded=True, reason=reason)
    
    def to_payload(self) -> List[Dict[str, str]]:
        """Список словарей для поля messages в запросе к LLM"""
        return [msg.to_dict() for msg in self.messages]
    