"""
Unit тесты для ChatService.
"""

import re

import pytest

from chat_memory.application.dto import ComparisonAnswer, SingleModelAnswer
from chat_memory.application.services import ChatService, ConversationService
from chat_memory.core.errors import MessageValidationError, ModelCallError, UnsupportedModelError
from chat_memory.domain.entities import MessageRole
from chat_memory.domain.services import ContextBuilder, SessionResolver, Summarizer

MODELS = {
    "deepseek": "deepseek/deepseek-chat-v3.1:free",
    "grok": "x-ai/grok-4-fast:free",
    "gemma": "google/gemma-3-27b-it:free",
}


@pytest.fixture
def conversation_service(memory_repository, llm_provider):
    resolver = SessionResolver(memory_repository)
    builder = ContextBuilder(memory_repository, resolver, Summarizer(llm_provider, model="summary-model"))
    return ConversationService(memory_repository, resolver, builder)


@pytest.fixture
def chat_service(conversation_service, llm_provider):
    return ChatService(conversation_service, llm_provider, models=MODELS)


class TestModelResolution:
    """Тесты alias моделей"""

    @pytest.mark.parametrize("alias,expected", [
        ("deepseek", "deepseek/deepseek-chat-v3.1:free"),
        ("GROK", "x-ai/grok-4-fast:free"),
        ("Gemma", "google/gemma-3-27b-it:free"),
    ])
    def test_known_aliases(self, chat_service, alias, expected):
        assert chat_service.resolve_model(alias) == expected

    @pytest.mark.parametrize("alias", ["all", "ALL"])
    def test_comparison_alias(self, chat_service, alias):
        assert chat_service.resolve_model(alias) is None

    def test_unknown_alias(self, chat_service):
        with pytest.raises(UnsupportedModelError) as exc_info:
            chat_service.resolve_model("gpt-5")

        assert exc_info.value.message == "Unsupported model: gpt-5. Available: deepseek, grok, gemma, all"


class TestSessionId:
    def test_generated_format(self):
        session_id = ChatService.generate_session_id()

        assert re.fullmatch(r"session_\d{13}_[0-9a-f]{8}", session_id)

    def test_generated_ids_differ(self):
        assert ChatService.generate_session_id() != ChatService.generate_session_id()


class TestAskSingleModel:
    """Тесты режима одной модели"""

    @pytest.mark.asyncio
    async def test_answer_is_recorded(self, chat_service, llm_provider, memory_repository):
        llm_provider.complete.return_value = "Rust is a systems language"

        answer = await chat_service.ask("What is Rust?", model="grok", session_id="s-1")

        assert isinstance(answer, SingleModelAnswer)
        assert answer.model == "x-ai/grok-4-fast:free"
        assert answer.response == "Rust is a systems language"
        assert answer.session_id == "s-1"

        kwargs = llm_provider.complete.await_args.kwargs
        assert kwargs["model"] == "x-ai/grok-4-fast:free"
        assert kwargs["messages"] == [{"role": "user", "content": "What is Rust?"}]
        assert kwargs["max_tokens"] == 1000
        assert kwargs["temperature"] == 0.7

        conversation = (await memory_repository.find_all_by_session_id("s-1"))[0]
        history = await memory_repository.list_messages(conversation.id)
        assert [(msg.role, msg.content, msg.model_name) for msg in history] == [
            (MessageRole.USER, "What is Rust?", None),
            (MessageRole.ASSISTANT, "Rust is a systems language", "x-ai/grok-4-fast:free"),
        ]

    @pytest.mark.asyncio
    async def test_follow_up_includes_history_once(self, chat_service, llm_provider):
        llm_provider.complete.return_value = "A1"
        await chat_service.ask("Q1", model="deepseek", session_id="s-1")

        llm_provider.complete.return_value = "A2"
        await chat_service.ask("Q2", model="deepseek", session_id="s-1")

        assert llm_provider.complete.await_args.kwargs["messages"] == [
            {"role": "user", "content": "Q1"},
            {"role": "assistant", "content": "A1"},
            {"role": "user", "content": "Q2"},
        ]

    @pytest.mark.asyncio
    async def test_blank_session_id_is_generated(self, chat_service):
        answer = await chat_service.ask("Hi", model="gemma", session_id="  ")

        assert answer.session_id.startswith("session_")

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, chat_service, llm_provider, memory_repository):
        llm_provider.complete.side_effect = ModelCallError(model="x-ai/grok-4-fast:free", reason="timeout")

        with pytest.raises(ModelCallError):
            await chat_service.ask("Hi", model="grok", session_id="s-1")

        conversation = (await memory_repository.find_all_by_session_id("s-1"))[0]
        history = await memory_repository.list_messages(conversation.id)
        assert [msg.role for msg in history] == [MessageRole.USER]

    @pytest.mark.asyncio
    async def test_blank_question_rejected(self, chat_service, llm_provider):
        with pytest.raises(MessageValidationError):
            await chat_service.ask("   ", model="grok", session_id="s-1")

        llm_provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_model_rejected_before_storage(self, chat_service, memory_repository):
        with pytest.raises(UnsupportedModelError):
            await chat_service.ask("Hi", model="claude", session_id="s-1")

        assert memory_repository.conversations == {}


class TestAskComparison:
    """Тесты режима сравнения"""

    @pytest.mark.asyncio
    async def test_all_models_answer(self, chat_service, llm_provider, memory_repository):
        async def complete(model, messages, max_tokens, temperature):
            return f"answer from {model}"

        llm_provider.complete.side_effect = complete

        answer = await chat_service.ask("Compare", session_id="s-1")

        assert isinstance(answer, ComparisonAnswer)
        assert [reply.model for reply in answer.model_responses] == list(MODELS.values())
        assert all(reply.status == "success" for reply in answer.model_responses)
        assert answer.responses["x-ai/grok-4-fast:free"] == "answer from x-ai/grok-4-fast:free"

        conversation = (await memory_repository.find_all_by_session_id("s-1"))[0]
        history = await memory_repository.list_messages(conversation.id)
        assert [msg.model_name for msg in history] == [None, *MODELS.values()]

    @pytest.mark.asyncio
    async def test_one_failure_does_not_block_others(self, chat_service, llm_provider, memory_repository):
        async def complete(model, messages, max_tokens, temperature):
            if model == "x-ai/grok-4-fast:free":
                raise ModelCallError(model=model, reason="Service unavailable", status_code=503)
            return f"answer from {model}"

        llm_provider.complete.side_effect = complete

        answer = await chat_service.ask("Compare", model="all", session_id="s-1")

        statuses = {reply.model: reply.status for reply in answer.model_responses}
        assert statuses == {
            "deepseek/deepseek-chat-v3.1:free": "success",
            "x-ai/grok-4-fast:free": "error",
            "google/gemma-3-27b-it:free": "success",
        }
        assert answer.responses["x-ai/grok-4-fast:free"].startswith("Error: Model call to 'x-ai/grok-4-fast:free' failed")

        conversation = (await memory_repository.find_all_by_session_id("s-1"))[0]
        history = await memory_repository.list_messages(conversation.id)
        assert [msg.model_name for msg in history] == [
            None,
            "deepseek/deepseek-chat-v3.1:free",
            "google/gemma-3-27b-it:free",
        ]

    @pytest.mark.asyncio
    async def test_models_see_only_user_messages(self, chat_service, llm_provider):
        await chat_service.ask("Q1", model="all", session_id="s-1")
        await chat_service.ask("Q2", model="all", session_id="s-1")

        for awaited in llm_provider.complete.await_args_list[-3:]:
            assert awaited.kwargs["messages"] == [
                {"role": "user", "content": "Q1"},
                {"role": "user", "content": "Q2"},
            ]
