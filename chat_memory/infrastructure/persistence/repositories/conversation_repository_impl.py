"""
Реализация ConversationRepository с использованием SQLAlchemy.

Каждая операция открывает собственную сессию и транзакцию и
фиксирует ее до возврата: между операциями блокировки не держатся.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ....domain.entities import Conversation, Message, MessageRole
from ....domain.repositories import ConversationRepository
from ....core.errors import DuplicateSessionError, RepositoryError
from ..models import ConversationModel, MessageModel
from ..mappers import ConversationMapper

logger = logging.getLogger("chat-memory.infrastructure.conversation_repository")


class ConversationRepositoryImpl(ConversationRepository):
    """
    Реализация репозитория conversations для SQLAlchemy.

    Атрибуты:
        _session_factory: Фабрика асинхронных сессий
        _mapper: Mapper для преобразования данных

    Пример:
        >>> repo = ConversationRepositoryImpl(async_session_maker)
        >>> conversations = await repo.find_all_by_session_id("session-123")
    """

    def __init__(self, session_factory: async_sessionmaker):
        """
        Инициализировать репозиторий.

        Args:
            session_factory: Фабрика сессий (async_sessionmaker)
        """
        self._session_factory = session_factory
        self._mapper = ConversationMapper()

    async def find_all_by_session_id(self, session_id: str) -> List[Conversation]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ConversationModel)
                    .where(ConversationModel.session_id == session_id)
                    .order_by(ConversationModel.id.asc())
                )
                models = result.scalars().all()

            logger.debug(f"Found {len(models)} conversations for session {session_id}")
            return [self._mapper.to_entity(model) for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error finding conversations for session {session_id}: {e}", exc_info=True)
            raise RepositoryError(
                operation="find_all_by_session_id",
                entity_type="Conversation",
                reason=str(e)
            )

    async def create(self, session_id: str) -> Conversation:
        """
        Создать conversation.

        Raises:
            DuplicateSessionError: Если session_id уже занят
            RepositoryError: При других ошибках БД
        """
        try:
            async with self._session_factory() as session:
                model = ConversationModel(session_id=session_id)
                session.add(model)
                await session.flush()
                conversation = self._mapper.to_entity(model)
                await session.commit()

            logger.debug(f"Inserted conversation {conversation.id} for session {session_id}")
            return conversation

        except IntegrityError as e:
            logger.warning(f"Unique conflict creating conversation for session {session_id}")
            raise DuplicateSessionError(session_id, details={"reason": str(e.orig)})
        except SQLAlchemyError as e:
            logger.error(f"Error creating conversation for session {session_id}: {e}", exc_info=True)
            raise RepositoryError(
                operation="create",
                entity_type="Conversation",
                reason=str(e)
            )

    async def delete_conversations(self, conversation_ids: Sequence[int]) -> int:
        ids = list(conversation_ids)
        if not ids:
            return 0

        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(MessageModel).where(MessageModel.conversation_id.in_(ids))
                )
                result = await session.execute(
                    delete(ConversationModel).where(ConversationModel.id.in_(ids))
                )
                await session.commit()

            logger.info(f"Deleted {result.rowcount} conversations: {ids}")
            return result.rowcount

        except SQLAlchemyError as e:
            logger.error(f"Error deleting conversations {ids}: {e}", exc_info=True)
            raise RepositoryError(
                operation="delete_conversations",
                entity_type="Conversation",
                reason=str(e)
            )

    async def list_conversations(self) -> List[Conversation]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ConversationModel)
                    .order_by(ConversationModel.created_at.desc(), ConversationModel.id.desc())
                )
                models = result.scalars().all()

            return [self._mapper.to_entity(model) for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error listing conversations: {e}", exc_info=True)
            raise RepositoryError(
                operation="list_conversations",
                entity_type="Conversation",
                reason=str(e)
            )

    async def add_message(
        self,
        conversation_id: int,
        role: MessageRole,
        content: str,
        model_name: Optional[str] = None
    ) -> Message:
        message = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            model_name=model_name
        )

        try:
            async with self._session_factory() as session:
                model = self._mapper.message_to_model(message)
                session.add(model)
                await session.flush()
                saved = self._mapper.message_to_entity(model)
                await session.commit()

            logger.debug(
                f"Added {role.value} message {saved.id} to conversation {conversation_id}"
            )
            return saved

        except SQLAlchemyError as e:
            logger.error(f"Error adding message to conversation {conversation_id}: {e}", exc_info=True)
            raise RepositoryError(
                operation="add_message",
                entity_type="Message",
                reason=str(e)
            )

    async def list_messages(self, conversation_id: int) -> List[Message]:
        messages = await self.list_messages_for([conversation_id])
        return messages.get(conversation_id, [])

    async def list_messages_for(
        self,
        conversation_ids: Sequence[int]
    ) -> Dict[int, List[Message]]:
        ids = list(conversation_ids)
        if not ids:
            return {}

        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(MessageModel)
                    .where(MessageModel.conversation_id.in_(ids))
                    .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
                )
                models = result.scalars().all()

            grouped: Dict[int, List[Message]] = defaultdict(list)
            for model in models:
                grouped[model.conversation_id].append(self._mapper.message_to_entity(model))
            return dict(grouped)

        except SQLAlchemyError as e:
            logger.error(f"Error listing messages for conversations {ids}: {e}", exc_info=True)
            raise RepositoryError(
                operation="list_messages",
                entity_type="Message",
                reason=str(e)
            )

    async def apply_compaction(
        self,
        conversation_id: int,
        summary: str,
        message_ids: Sequence[int]
    ) -> int:
        ids = list(message_ids)

        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(ConversationModel)
                    .where(ConversationModel.id == conversation_id)
                    .values(summary=summary)
                )
                deleted = 0
                if ids:
                    result = await session.execute(
                        delete(MessageModel)
                        .where(MessageModel.conversation_id == conversation_id)
                        .where(MessageModel.id.in_(ids))
                    )
                    deleted = result.rowcount
                await session.commit()

            logger.debug(
                f"Stored summary of conversation {conversation_id}, deleted {deleted} messages"
            )
            return deleted

        except SQLAlchemyError as e:
            logger.error(f"Error compacting conversation {conversation_id}: {e}", exc_info=True)
            raise RepositoryError(
                operation="apply_compaction",
                entity_type="Conversation",
                reason=str(e)
            )
