"""
Domain Service для сжатия истории диалога.

Решает, когда историю пора сжимать, и строит резюме ранней части
через LLM с детерминированным резервным вариантом.
"""

import logging
from typing import List, Optional

from ..entities import Message
from ..ports import ILLMProvider
from ..value_objects import CompactionResult
from ...core.errors import ModelCallError

logger = logging.getLogger("chat-memory.domain.summarizer")


class Summarizer:
    """
    Сжатие истории: резюме старых сообщений + последние сообщения.

    Правила:
    - сжатие нужно, когда сообщений больше SUMMARIZATION_THRESHOLD;
    - последние RECENT_MESSAGES_KEEP сообщений остаются как есть;
    - при любой ошибке LLM резюме строится из сообщений пользователя,
      а история не сокращается.

    Атрибуты:
        model: Модель для резюмирования
        include_previous_summary: Передавать ли прежнее резюме в запрос

    Пример:
        >>> summarizer = Summarizer(llm_provider, model="deepseek/deepseek-chat-v3.1:free")
        >>> if summarizer.should_compact(messages):
        ...     result = await summarizer.compact(messages)
    """

    SUMMARIZATION_THRESHOLD = 5
    RECENT_MESSAGES_KEEP = 3
    MAX_SUMMARY_WORDS = 100
    SUMMARY_MAX_TOKENS = 150
    SUMMARY_TEMPERATURE = 0.3

    FALLBACK_SNIPPET_LENGTH = 30
    FALLBACK_PREFIX = "User has discussed: "
    FALLBACK_GENERIC = "User has had a conversation with the AI assistant."

    def __init__(
        self,
        llm_provider: ILLMProvider,
        model: str,
        include_previous_summary: bool = False
    ):
        self._llm = llm_provider
        self.model = model
        self.include_previous_summary = include_previous_summary

    def should_compact(self, messages: List[Message]) -> bool:
        """Нужно ли сжатие: сообщений строго больше порога"""
        return len(messages) > self.SUMMARIZATION_THRESHOLD

    async def compact(
        self,
        messages: List[Message],
        previous_summary: Optional[str] = None
    ) -> CompactionResult:
        """
        Сжать историю.

        Args:
            messages: Полная история в хронологическом порядке
            previous_summary: Сохраненное резюме; учитывается только
                при include_previous_summary=True

        Returns:
            CompactionResult. При ошибке LLM used_fallback=True,
            recent_messages - вся исходная история.
        """
        if not messages:
            return CompactionResult.empty()

        split_at = max(0, len(messages) - self.RECENT_MESSAGES_KEEP)
        older = list(messages[:split_at])
        recent = list(messages[split_at:])

        if not older:
            return CompactionResult(summary="", recent_messages=recent)

        try:
            summary = await self._generate_summary(older, previous_summary)
        except Exception as e:
            logger.warning(
                f"Summarization failed, using fallback summary: {e}",
                exc_info=True
            )
            return CompactionResult(
                summary=self.build_fallback_summary(messages),
                recent_messages=list(messages),
                used_fallback=True
            )

        logger.info(
            f"Summarized {len(older)} messages, keeping {len(recent)} recent"
        )
        return CompactionResult(
            summary=summary,
            recent_messages=recent,
            summarized_messages=older
        )

    def build_summary_prompt(
        self,
        messages: List[Message],
        previous_summary: Optional[str] = None
    ) -> str:
        """Собрать инструкцию для резюмирования"""
        conversation_text = "\n".join(
            f"{msg.role.value.upper()}: {msg.content}" for msg in messages
        )

        if self.include_previous_summary and previous_summary and previous_summary.strip():
            conversation_text = (
                f"Summary of the earlier conversation: {previous_summary.strip()}\n\n"
                f"{conversation_text}"
            )

        return (
            f"Please provide a concise summary (max {self.MAX_SUMMARY_WORDS} words) "
            f"of this conversation. "
            f"Focus on the main topics discussed and key points. "
            f"Do not include specific details, just the general themes:\n\n"
            f"{conversation_text}"
        )

    async def _generate_summary(
        self,
        messages: List[Message],
        previous_summary: Optional[str]
    ) -> str:
        prompt = self.build_summary_prompt(messages, previous_summary)

        content = await self._llm.complete(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.SUMMARY_MAX_TOKENS,
            temperature=self.SUMMARY_TEMPERATURE
        )

        summary = content.strip() if isinstance(content, str) else ""
        if not summary:
            raise ModelCallError(model=self.model, reason="Empty summary content")
        return summary

    @classmethod
    def build_fallback_summary(cls, messages: List[Message]) -> str:
        """
        Детерминированное резюме из сообщений пользователя.

        Берутся user-сообщения всей истории, каждое обрезается до
        FALLBACK_SNIPPET_LENGTH символов.
        """
        snippets = []
        for msg in messages:
            if not msg.is_user_message():
                continue
            content = msg.content
            if len(content) > cls.FALLBACK_SNIPPET_LENGTH:
                content = content[:cls.FALLBACK_SNIPPET_LENGTH] + "..."
            snippets.append(content)

        if not snippets:
            return cls.FALLBACK_GENERIC

        return cls.FALLBACK_PREFIX + ", ".join(snippets)
