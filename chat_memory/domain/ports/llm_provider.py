"""
Port для LLM провайдера.

Определяет контракт вызова модели: сообщения на входе, текст на выходе.
"""

from abc import ABC, abstractmethod
from typing import Dict, List


class ILLMProvider(ABC):
    """
    Port (интерфейс) для LLM провайдера.
    
    Реализации этого интерфейса находятся в infrastructure слое.
    Таймауты и отмена - ответственность реализации; для доменного
    слоя любая ошибка вызова выглядит одинаково.
    
    Examples:
        >>> text = await provider.complete(
        ...     model="x-ai/grok-4-fast:free",
        ...     messages=[{"role": "user", "content": "Hello"}],
        ...     max_tokens=1000,
        ...     temperature=0.7
        ... )
    """
    
    @abstractmethod
    async def complete(
        self,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float
    ) -> str:
        """
        Выполнить chat completion запрос (без стриминга).
        
        Args:
            model: ID модели у провайдера
            messages: Контекст в формате [{role, content}]
            max_tokens: Ограничение длины ответа
            temperature: Температура генерации
            
        Returns:
            Текст choices[0].message.content
            
        Raises:
            ModelCallError: При сетевой ошибке, ошибке HTTP или
                ответе без содержимого
        """
        pass

    async def close(self) -> None:
        """Освободить ресурсы провайдера (соединения). По умолчанию ничего не делает."""
