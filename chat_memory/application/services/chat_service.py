"""
Chat Service.

Обработка одного вопроса пользователя: одна модель с памятью
(резюме + последние сообщения) или сравнение всех моделей.
"""

import asyncio
import logging
import time
import uuid
from typing import Dict, List, Optional, Union

from ...core.config import AppConfig
from ...core.errors import MessageValidationError, UnsupportedModelError
from ...domain.entities import MessageRole
from ...domain.ports import ILLMProvider
from ...domain.value_objects import ContextMessage, ModelReply
from ..dto import ComparisonAnswer, SingleModelAnswer
from .conversation_service import ConversationService

logger = logging.getLogger("chat-memory.application.chat_service")


class ChatService:
    """
    Сценарий "задать вопрос".

    Атрибуты:
        models: alias -> id модели у провайдера (порядок = порядок сравнения)

    Пример:
        >>> chat = ChatService(conversation_service, llm_provider)
        >>> answer = await chat.ask("What is Rust?", model="grok", session_id="s-1")
        >>> comparison = await chat.ask("And Go?", session_id="s-1")
    """

    COMPARISON_ALIAS = "all"
    SESSION_PREFIX = "session_"

    ANSWER_MAX_TOKENS = 1000
    ANSWER_TEMPERATURE = 0.7

    def __init__(
        self,
        conversation_service: ConversationService,
        llm_provider: ILLMProvider,
        models: Optional[Dict[str, str]] = None
    ):
        self._conversations = conversation_service
        self._llm = llm_provider
        self.models = dict(models) if models is not None else AppConfig.model_aliases()

    @classmethod
    def generate_session_id(cls) -> str:
        """session_<epoch millis>_<8 hex символов>"""
        return f"{cls.SESSION_PREFIX}{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"

    def available_models(self) -> List[str]:
        return [*self.models.keys(), self.COMPARISON_ALIAS]

    def resolve_model(self, alias: str) -> Optional[str]:
        """
        Alias модели -> id модели.

        Returns:
            id модели или None для режима сравнения ("all")

        Raises:
            UnsupportedModelError: Неизвестный alias
        """
        key = (alias or self.COMPARISON_ALIAS).strip().lower()
        if key == self.COMPARISON_ALIAS:
            return None
        if key not in self.models:
            raise UnsupportedModelError(alias, self.available_models())
        return self.models[key]

    async def ask(
        self,
        question: str,
        model: str = COMPARISON_ALIAS,
        session_id: Optional[str] = None
    ) -> Union[SingleModelAnswer, ComparisonAnswer]:
        """
        Задать вопрос одной модели или всем сразу.

        Args:
            question: Вопрос пользователя
            model: Alias модели или "all"
            session_id: Session id (пустой - будет сгенерирован)

        Raises:
            MessageValidationError: Пустой вопрос
            UnsupportedModelError: Неизвестный alias
            ModelCallError: Ошибка модели в режиме одной модели
            ConflictExhaustedError: Conversation не удалось создать или найти
        """
        if not question or not question.strip():
            raise MessageValidationError("question", "must not be blank")

        model_id = self.resolve_model(model)

        if not session_id or not session_id.strip():
            session_id = self.generate_session_id()
            logger.info(f"Generated session id {session_id}")

        if model_id is None:
            return await self.compare(question, session_id)
        return await self.ask_model(model_id, question, session_id)

    async def ask_model(
        self,
        model_id: str,
        question: str,
        session_id: str
    ) -> SingleModelAnswer:
        """
        Режим одной модели.

        Контекст собирается до записи вопроса в историю: вопрос
        добавляется в контекст последней user-записью.
        """
        conversation = await self._conversations.get_or_create_conversation(session_id)
        context = await self._conversations.get_context_for_single_model(session_id, question)
        if context.degraded:
            logger.warning(f"Answering session {session_id} with minimal context: {context.reason}")

        await self._conversations.add_message(conversation, MessageRole.USER, question)

        response = await self._llm.complete(
            model=model_id,
            messages=context.to_payload(),
            max_tokens=self.ANSWER_MAX_TOKENS,
            temperature=self.ANSWER_TEMPERATURE
        )

        await self._conversations.add_message(
            conversation,
            MessageRole.ASSISTANT,
            response,
            model_name=model_id
        )
        return SingleModelAnswer(model=model_id, response=response, session_id=session_id)

    async def compare(self, question: str, session_id: str) -> ComparisonAnswer:
        """
        Режим сравнения: все модели получают только вопросы пользователя.

        Ошибка одной модели не влияет на остальные.
        """
        conversation = await self._conversations.get_or_create_conversation(session_id)
        await self._conversations.add_message(conversation, MessageRole.USER, question)

        context = await self._conversations.get_context_for_comparison(session_id)
        payload = context.to_payload()
        if not payload:
            payload = [ContextMessage.user(question).to_dict()]

        model_ids = list(self.models.values())
        replies: List[ModelReply] = await asyncio.gather(
            *(self._call_isolated(model_id, payload) for model_id in model_ids)
        )

        for reply in replies:
            if reply.is_success:
                await self._conversations.add_message(
                    conversation,
                    MessageRole.ASSISTANT,
                    reply.response,
                    model_name=reply.model
                )

        succeeded = sum(1 for reply in replies if reply.is_success)
        logger.info(
            f"Comparison for session {session_id}: {succeeded}/{len(replies)} models answered"
        )
        return ComparisonAnswer.from_replies(question, session_id, replies)

    async def _call_isolated(self, model_id: str, payload: List[Dict[str, str]]) -> ModelReply:
        try:
            response = await self._llm.complete(
                model=model_id,
                messages=payload,
                max_tokens=self.ANSWER_MAX_TOKENS,
                temperature=self.ANSWER_TEMPERATURE
            )
        except Exception as e:
            logger.error(f"Model {model_id} failed in comparison: {e}", exc_info=True)
            return ModelReply.error(model_id, e)
        return ModelReply.success(model_id, response)
