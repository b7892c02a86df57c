"""
Conversation Service (façade).

Единая точка входа для API: conversations, сообщения и сборка
контекста поверх доменных сервисов.
"""

import logging
from typing import List, Optional, Union

from ...core.errors import MessageValidationError
from ...domain.entities import Conversation, Message, MessageRole
from ...domain.repositories import ConversationRepository
from ...domain.services import ContextBuilder, SessionResolver
from ...domain.value_objects import BuiltContext
from ..dto import ConversationDetails, ConversationSummary

logger = logging.getLogger("chat-memory.application.conversation_service")


class ConversationService:
    """
    Façade над SessionResolver, ContextBuilder и репозиторием.

    Чтение истории и сборка контекста не создают conversations.
    Изменяющие операции пробрасывают ошибки хранилища.

    Пример:
        >>> service = ConversationService(repository, resolver, context_builder)
        >>> conversation = await service.get_or_create_conversation("session-1")
        >>> await service.add_message(conversation, MessageRole.USER, "Hi")
        >>> history = await service.get_history("session-1")
    """

    def __init__(
        self,
        repository: ConversationRepository,
        resolver: SessionResolver,
        context_builder: ContextBuilder
    ):
        self._repository = repository
        self._resolver = resolver
        self._context_builder = context_builder

    async def get_or_create_conversation(self, session_id: str) -> Conversation:
        """
        Получить conversation для session id, создав при отсутствии.

        Raises:
            MessageValidationError: Пустой session id
            ConflictExhaustedError: Конфликт создания не разрешился
        """
        if not session_id or not session_id.strip():
            raise MessageValidationError("session_id", "must not be blank")
        return await self._resolver.resolve(session_id)

    async def find_conversation(self, session_id: str) -> Optional[Conversation]:
        """Найти conversation без создания (с канонизацией дубликатов)"""
        return await self._resolver.find(session_id)

    async def add_message(
        self,
        conversation: Conversation,
        role: Union[MessageRole, str],
        content: str,
        model_name: Optional[str] = None
    ) -> Message:
        """
        Добавить сообщение в конец истории.

        Args:
            conversation: Сохраненный conversation
            role: Роль (MessageRole или "system"/"user"/"assistant")
            content: Текст сообщения
            model_name: Модель-автор (для assistant)

        Raises:
            MessageValidationError: Неизвестная роль, нет content
                или conversation не сохранен
        """
        if conversation.id is None:
            raise MessageValidationError("conversation", "conversation is not persisted")

        try:
            message_role = MessageRole(role)
        except ValueError:
            raise MessageValidationError("role", f"unknown role '{role}'")

        if content is None:
            raise MessageValidationError("content", "must not be null")

        message = await self._repository.add_message(
            conversation.id,
            message_role,
            content,
            model_name=model_name
        )
        logger.debug(
            f"Appended {message_role.value} message to session {conversation.session_id}"
        )
        return message

    async def get_history(self, session_id: str) -> List[Message]:
        """
        История session id в порядке добавления.

        Returns:
            Пустой список, если conversation нет
        """
        conversation = await self._resolver.find(session_id)
        if conversation is None:
            return []
        return await self._repository.list_messages(conversation.id)

    async def get_context_for_single_model(
        self,
        session_id: str,
        user_message: str
    ) -> BuiltContext:
        return await self._context_builder.build_for_single_model(session_id, user_message)

    async def get_context_for_comparison(self, session_id: str) -> BuiltContext:
        return await self._context_builder.build_for_comparison(session_id)

    async def clear_history(self, session_id: str) -> int:
        """
        Очистить историю: удалить все conversations session id
        вместе с сообщениями.

        Returns:
            Количество удаленных conversations
        """
        deleted = await self._delete_all(session_id)
        logger.info(f"Cleared history for session {session_id} ({deleted} conversations)")
        return deleted

    async def delete_conversation(self, session_id: str) -> int:
        """
        Удалить conversation session id (и все дубликаты).

        Returns:
            Количество удаленных conversations
        """
        deleted = await self._delete_all(session_id)
        logger.info(f"Deleted conversation for session {session_id} ({deleted} rows)")
        return deleted

    async def _delete_all(self, session_id: str) -> int:
        conversations = await self._repository.find_all_by_session_id(session_id)
        if not conversations:
            return 0
        return await self._repository.delete_conversations([conv.id for conv in conversations])

    async def list_conversations(self) -> List[ConversationSummary]:
        """Все conversations, новые первыми"""
        conversations = await self._repository.list_conversations()
        if not conversations:
            return []

        messages = await self._repository.list_messages_for([conv.id for conv in conversations])
        return [
            ConversationSummary.from_entity(conv, messages.get(conv.id, []))
            for conv in conversations
        ]

    async def get_conversation_details(self, session_id: str) -> Optional[ConversationDetails]:
        """
        Детали conversation.

        Returns:
            ConversationDetails или None, если conversation нет
        """
        conversation = await self._resolver.find(session_id)
        if conversation is None:
            return None

        messages = await self._repository.list_messages(conversation.id)
        return ConversationDetails.from_entity(conversation, messages)
