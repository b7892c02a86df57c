"""
Domain Service для разрешения session id в conversation.

Оптимистичная схема вместо блокировок: вставка, повторный поиск при
конфликте уникальности и идемпотентная канонизация дубликатов.
"""

import asyncio
import logging
from typing import List, Optional

from ..entities import Conversation
from ..repositories import ConversationRepository
from ...core.errors import ConflictExhaustedError, DuplicateSessionError

logger = logging.getLogger("chat-memory.domain.session_resolver")


class SessionResolver:
    """
    Отображает session id ровно в один conversation.

    Хранилище работает с изоляцией READ COMMITTED, поэтому
    одновременные первые запросы с одним session id могут:
    - получить конфликт уникальности при вставке (строку создал
      другой запрос) - тогда ищем заново и ждем с нарастающей
      задержкой, если строка еще не видна;
    - увидеть несколько строк - тогда оставляем строку с
      наибольшим id, остальные удаляем.

    Атрибуты:
        max_attempts: Число попыток get-or-create
        base_delay: Базовая задержка между попытками (секунды)
        delay_step: Прирост задержки на каждую попытку (секунды)

    Пример:
        >>> resolver = SessionResolver(repository)
        >>> conversation = await resolver.resolve("session-123")
    """

    MAX_ATTEMPTS = 3
    BASE_DELAY = 0.05
    DELAY_STEP = 0.025

    def __init__(
        self,
        repository: ConversationRepository,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_DELAY,
        delay_step: float = DELAY_STEP
    ):
        self._repository = repository
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.delay_step = delay_step

    async def resolve(self, session_id: str) -> Conversation:
        """
        Получить или создать conversation для session id.

        Args:
            session_id: Session id

        Returns:
            Единственный (канонический) conversation

        Raises:
            ConflictExhaustedError: Если после конфликтов строка так и
                не стала видна за max_attempts попыток
        """
        for attempt in range(self.max_attempts):
            existing = await self.find(session_id)
            if existing is not None:
                return existing

            try:
                conversation = await self._repository.create(session_id)
                logger.info(
                    f"Created conversation {conversation.id} for session {session_id}"
                )
                return conversation
            except DuplicateSessionError:
                logger.warning(
                    f"Concurrent creation detected for session {session_id} "
                    f"(attempt {attempt + 1}/{self.max_attempts})"
                )

            # Строку создал другой запрос - она должна быть видна
            existing = await self.find(session_id)
            if existing is not None:
                return existing

            if attempt < self.max_attempts - 1:
                delay = self.base_delay + attempt * self.delay_step
                logger.debug(
                    f"Conversation for session {session_id} not visible yet, "
                    f"retrying in {delay:.3f}s"
                )
                await asyncio.sleep(delay)

        logger.error(
            f"Failed to resolve session {session_id} after {self.max_attempts} attempts"
        )
        raise ConflictExhaustedError(session_id, attempts=self.max_attempts)

    async def find(self, session_id: str) -> Optional[Conversation]:
        """
        Найти conversation без создания.

        При нескольких строках с одним session id выполняет канонизацию.

        Returns:
            Conversation или None, если не найден
        """
        conversations = await self._repository.find_all_by_session_id(session_id)
        if not conversations:
            return None
        if len(conversations) == 1:
            return conversations[0]
        return await self.reconcile(session_id, conversations)

    async def reconcile(
        self,
        session_id: str,
        conversations: Optional[List[Conversation]] = None
    ) -> Optional[Conversation]:
        """
        Канонизировать дубликаты session id.

        Оставляет conversation с наибольшим id, остальные удаляет
        вместе с сообщениями. Идемпотентна: повторный вызов без
        дубликатов ничего не меняет.

        Args:
            session_id: Session id
            conversations: Уже найденные строки (иначе будут запрошены)

        Returns:
            Сохраненный conversation или None, если строк нет
        """
        if conversations is None:
            conversations = await self._repository.find_all_by_session_id(session_id)
        if not conversations:
            return None

        canonical = max(conversations, key=lambda conv: conv.id)
        stale_ids = [conv.id for conv in conversations if conv.id != canonical.id]

        if stale_ids:
            logger.warning(
                f"Found {len(conversations)} conversations for session {session_id}, "
                f"keeping {canonical.id}, deleting {stale_ids}"
            )
            await self._repository.delete_conversations(stale_ids)

        return canonical
