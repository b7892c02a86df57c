"""
Value Object результата сжатия истории.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..entities.message import Message


class CompactionResult(BaseModel):
    """
    Неизменяемый результат Summarizer.compact.
    
    Не содержит побочных эффектов: сохранение резюме и удаление
    сообщений выполняет вызывающая сторона.
    
    Атрибуты:
        summary: Текст резюме (пустой, если резюмировать было нечего)
        recent_messages: Сообщения, которые остаются в истории
        summarized_messages: Сообщения, вошедшие в резюме и подлежащие удалению
        used_fallback: Резюме построено детерминированно после ошибки LLM
    """
    
    model_config = ConfigDict(frozen=True)
    
    summary: str = ""
    recent_messages: List[Message] = Field(default_factory=list)
    summarized_messages: List[Message] = Field(default_factory=list)
    used_fallback: bool = False
    
    @classmethod
    def empty(cls) -> "CompactionResult":
        return cls()
