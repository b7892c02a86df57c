"""
Unit тесты для Summarizer.
"""

import pytest

from chat_memory.core.errors import ModelCallError
from chat_memory.domain.entities import MessageRole
from chat_memory.domain.services import Summarizer


def alternating(count: int):
    """user/assistant по очереди, начиная с user"""
    return [
        ("user" if index % 2 == 0 else "assistant", f"message {index}")
        for index in range(count)
    ]


@pytest.fixture
def summarizer(llm_provider):
    return Summarizer(llm_provider, model="summary-model")


class TestShouldCompact:
    """Тесты порога сжатия"""

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 4, 5])
    def test_not_needed_up_to_threshold(self, summarizer, message_factory, count):
        assert summarizer.should_compact(message_factory(*alternating(count))) is False

    @pytest.mark.parametrize("count", [6, 7, 20])
    def test_needed_above_threshold(self, summarizer, message_factory, count):
        assert summarizer.should_compact(message_factory(*alternating(count))) is True


class TestCompact:
    """Тесты Summarizer.compact"""

    @pytest.mark.asyncio
    async def test_empty_history(self, summarizer, llm_provider):
        result = await summarizer.compact([])

        assert result.summary == ""
        assert result.recent_messages == []
        assert result.summarized_messages == []
        llm_provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_short_history_is_kept_without_call(self, summarizer, llm_provider, message_factory):
        messages = message_factory(("user", "Hi"), ("assistant", "Hello"), ("user", "How are you?"))

        result = await summarizer.compact(messages)

        assert result.summary == ""
        assert result.recent_messages == messages
        assert not result.used_fallback
        llm_provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_splits_older_and_recent(self, summarizer, llm_provider, message_factory):
        llm_provider.complete.return_value = "  The user asked about Rust and Go.  "
        messages = message_factory(*alternating(8))

        result = await summarizer.compact(messages)

        assert result.summary == "The user asked about Rust and Go."
        assert result.summarized_messages == messages[:5]
        assert result.recent_messages == messages[5:]
        assert not result.used_fallback

    @pytest.mark.asyncio
    async def test_request_parameters(self, summarizer, llm_provider, message_factory):
        llm_provider.complete.return_value = "Summary"
        messages = message_factory(*alternating(6))

        await summarizer.compact(messages)

        kwargs = llm_provider.complete.await_args.kwargs
        assert kwargs["model"] == "summary-model"
        assert kwargs["max_tokens"] == 150
        assert kwargs["temperature"] == 0.3
        assert len(kwargs["messages"]) == 1
        assert kwargs["messages"][0]["role"] == "user"

        prompt = kwargs["messages"][0]["content"]
        assert "max 100 words" in prompt
        assert "USER: message 0\nASSISTANT: message 1\nUSER: message 2" in prompt
        # Последние 3 сообщения не резюмируются
        assert "message 3" not in prompt

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_user_topics(self, summarizer, llm_provider, message_factory):
        llm_provider.complete.side_effect = ModelCallError(model="summary-model", reason="boom", status_code=503)
        messages = message_factory(*alternating(8))

        result = await summarizer.compact(messages)

        assert result.used_fallback
        assert result.summary.startswith("User has discussed:")
        assert len(result.recent_messages) == 8
        assert result.summarized_messages == []

    @pytest.mark.asyncio
    async def test_blank_content_falls_back(self, summarizer, llm_provider, message_factory):
        llm_provider.complete.return_value = "   "

        result = await summarizer.compact(message_factory(*alternating(6)))

        assert result.used_fallback
        assert len(result.recent_messages) == 6

    @pytest.mark.asyncio
    async def test_previous_summary_ignored_by_default(self, summarizer, llm_provider, message_factory):
        llm_provider.complete.return_value = "Summary"

        await summarizer.compact(message_factory(*alternating(6)), previous_summary="Earlier: cats")

        prompt = llm_provider.complete.await_args.kwargs["messages"][0]["content"]
        assert "Earlier: cats" not in prompt

    @pytest.mark.asyncio
    async def test_previous_summary_included_when_enabled(self, llm_provider, message_factory):
        summarizer = Summarizer(llm_provider, model="summary-model", include_previous_summary=True)
        llm_provider.complete.return_value = "Summary"

        await summarizer.compact(message_factory(*alternating(6)), previous_summary="Earlier: cats")

        prompt = llm_provider.complete.await_args.kwargs["messages"][0]["content"]
        assert "Earlier: cats" in prompt


class TestFallbackSummary:
    """Тесты детерминированного резюме"""

    def test_truncates_long_user_messages(self, message_factory):
        messages = message_factory(
            ("user", "Tell me everything about the borrow checker in Rust"),
            ("assistant", "Sure"),
            ("user", "Thanks"),
        )

        summary = Summarizer.build_fallback_summary(messages)

        assert summary == "User has discussed: Tell me everything about the b..., Thanks"

    def test_exactly_thirty_characters_not_truncated(self, message_factory):
        text = "a" * 30
        summary = Summarizer.build_fallback_summary(message_factory(("user", text)))

        assert summary == f"User has discussed: {text}"

    def test_no_user_messages(self, message_factory):
        messages = message_factory(("assistant", "Hello"), ("system", "Be nice"))

        summary = Summarizer.build_fallback_summary(messages)

        assert summary == "User has had a conversation with the AI assistant."

    def test_roles_are_untouched(self, message_factory):
        messages = message_factory(("user", "Hi"))
        Summarizer.build_fallback_summary(messages)
        assert messages[0].role == MessageRole.USER
