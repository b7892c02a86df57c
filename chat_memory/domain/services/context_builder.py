"""
Domain Service для сборки контекста LLM.

Два режима:
- single model: история (или резюме + последние сообщения) и новый вопрос;
- comparison: только сообщения пользователя, чтобы все модели
  получали одинаковую историю без чужих ответов.
"""

import logging
from typing import List, Optional

from ..entities import Conversation, Message
from ..repositories import ConversationRepository
from ..value_objects import BuiltContext, CompactionResult, ContextMessage
from .session_resolver import SessionResolver
from .summarizer import Summarizer

logger = logging.getLogger("chat-memory.domain.context_builder")


class ContextBuilder:
    """
    Сборка упорядоченного списка {role, content} для вызова модели.

    Сборка контекста никогда не должна быть причиной ошибки запроса:
    при любой внутренней ошибке возвращается минимальный контекст
    с флагом degraded.

    Пример:
        >>> builder = ContextBuilder(repository, resolver, summarizer)
        >>> context = await builder.build_for_single_model("session-1", "Hi")
        >>> payload = context.to_payload()
    """

    SUMMARY_TEMPLATE = (
        "Past conversation summary: {summary}. "
        "Do not repeat this in your response, just use it as memory."
    )

    def __init__(
        self,
        repository: ConversationRepository,
        resolver: SessionResolver,
        summarizer: Summarizer
    ):
        self._repository = repository
        self._resolver = resolver
        self._summarizer = summarizer

    async def build_for_comparison(self, session_id: str) -> BuiltContext:
        """
        Контекст режима сравнения: только user-сообщения по порядку.

        Returns:
            Пустой контекст, если conversation нет или произошла ошибка
        """
        try:
            conversation = await self._resolver.find(session_id)
            if conversation is None:
                return BuiltContext()

            history = await self._repository.list_messages(conversation.id)
            return BuiltContext(messages=[
                ContextMessage.from_message(msg)
                for msg in history
                if msg.is_user_message()
            ])
        except Exception as e:
            logger.error(
                f"Failed to build comparison context for session {session_id}: {e}",
                exc_info=True
            )
            return BuiltContext.degraded_to([], reason=str(e))

    async def build_for_single_model(
        self,
        session_id: str,
        user_message: str
    ) -> BuiltContext:
        """
        Контекст для одной модели со сжатием длинной истории.

        Args:
            session_id: Session id
            user_message: Новое сообщение пользователя

        Returns:
            BuiltContext; при ошибке - только новое сообщение
        """
        current = ContextMessage.user(user_message)

        try:
            conversation = await self._resolver.find(session_id)
            if conversation is None:
                return BuiltContext(messages=[current])

            history = await self._repository.list_messages(conversation.id)

            if not self._summarizer.should_compact(history):
                messages = [ContextMessage.from_message(msg) for msg in history]
                messages.append(current)
                return BuiltContext(messages=messages)

            result = await self._summarizer.compact(
                history,
                previous_summary=conversation.summary
            )
            await self._apply_compaction(conversation, result)

            return BuiltContext(
                messages=self.build_context_with_summary(
                    result.summary,
                    result.recent_messages,
                    user_message
                ),
                compacted=not result.used_fallback
            )
        except Exception as e:
            logger.error(
                f"Failed to build context for session {session_id}, "
                f"falling back to current message only: {e}",
                exc_info=True
            )
            return BuiltContext.degraded_to([current], reason=str(e))

    async def _apply_compaction(
        self,
        conversation: Conversation,
        result: CompactionResult
    ) -> None:
        """
        Сохранить результат сжатия.

        Резюме перезаписывается, резюмированные сообщения удаляются.
        Резервное резюме не сохраняется и ничего не удаляет.
        """
        if result.used_fallback:
            logger.warning(
                f"Fallback summary used for conversation {conversation.id}, "
                f"history kept intact"
            )
            return

        stale_ids = [msg.id for msg in result.summarized_messages if msg.id is not None]
        await self._repository.apply_compaction(conversation.id, result.summary, stale_ids)

        logger.info(
            f"Compacted conversation {conversation.id}: "
            f"{len(stale_ids)} messages summarized, "
            f"{len(result.recent_messages)} kept"
        )

    @classmethod
    def build_context_with_summary(
        cls,
        summary: Optional[str],
        recent_messages: List[Message],
        user_message: str
    ) -> List[ContextMessage]:
        """
        Собрать контекст: [system: резюме] + последние сообщения + вопрос.

        System-запись добавляется только для непустого резюме.
        """
        context: List[ContextMessage] = []

        if summary and summary.strip():
            context.append(ContextMessage.system(cls.SUMMARY_TEMPLATE.format(summary=summary)))

        context.extend(ContextMessage.from_message(msg) for msg in recent_messages)
        context.append(ContextMessage.user(user_message))
        return context
