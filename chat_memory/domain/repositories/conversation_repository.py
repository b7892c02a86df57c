"""
Conversation Repository Interface.

Определяет контракт хранилища conversations и сообщений.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..entities import Conversation, Message, MessageRole


class ConversationRepository(ABC):
    """
    Repository interface для Conversation и Message.

    Хранилище гарантирует уникальность session_id только на уровне
    ограничения БД при изоляции READ COMMITTED, поэтому поиск по
    session id возвращает *все* найденные строки: неоднозначность
    должна быть видна вызывающей стороне (см. SessionResolver).

    Каждая операция выполняется в собственной короткой транзакции.

    Пример:
        >>> class ConversationRepositoryImpl(ConversationRepository):
        ...     async def find_all_by_session_id(self, session_id):
        ...         # Implementation
        ...         pass
    """

    @abstractmethod
    async def find_all_by_session_id(self, session_id: str) -> List[Conversation]:
        """
        Найти все conversations с данным session id.

        Args:
            session_id: Session id

        Returns:
            Список conversations, отсортированный по id (возрастание).
            Больше одного элемента означает дубликаты.
        """
        pass

    @abstractmethod
    async def create(self, session_id: str) -> Conversation:
        """
        Создать conversation.

        Args:
            session_id: Session id

        Returns:
            Созданный conversation с присвоенным id

        Raises:
            DuplicateSessionError: При нарушении уникальности session_id
        """
        pass

    @abstractmethod
    async def delete_conversations(self, conversation_ids: Sequence[int]) -> int:
        """
        Удалить conversations вместе с их сообщениями.

        Returns:
            Количество удаленных conversations
        """
        pass

    @abstractmethod
    async def list_conversations(self) -> List[Conversation]:
        """
        Получить все conversations, новые первыми (по created_at).
        """
        pass

    @abstractmethod
    async def add_message(
        self,
        conversation_id: int,
        role: MessageRole,
        content: str,
        model_name: Optional[str] = None
    ) -> Message:
        """
        Добавить сообщение в конец истории conversation.

        Returns:
            Сохраненное сообщение с id и created_at
        """
        pass

    @abstractmethod
    async def list_messages(self, conversation_id: int) -> List[Message]:
        """
        Получить историю conversation в порядке добавления.

        Порядок: created_at, затем id (порядок вставки).
        """
        pass

    @abstractmethod
    async def list_messages_for(
        self,
        conversation_ids: Sequence[int]
    ) -> Dict[int, List[Message]]:
        """
        Получить истории нескольких conversations одним запросом.

        Returns:
            Словарь conversation_id -> упорядоченные сообщения
            (conversations без сообщений в словарь могут не попасть)
        """
        pass

    @abstractmethod
    async def apply_compaction(
        self,
        conversation_id: int,
        summary: str,
        message_ids: Sequence[int]
    ) -> int:
        """
        Сохранить результат сжатия одной транзакцией.

        Резюме перезаписывается, резюмированные сообщения удаляются.
        При ошибке не применяется ни то, ни другое.

        Args:
            conversation_id: ID conversation
            summary: Новое резюме
            message_ids: ID резюмированных сообщений

        Returns:
            Количество удаленных сообщений
        """
        pass
