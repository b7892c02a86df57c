"""
Pytest configuration and fixtures.
"""
import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence
from unittest.mock import AsyncMock, patch

import pytest

from chat_memory.core.errors import DuplicateSessionError
from chat_memory.domain.entities import Conversation, Message, MessageRole
from chat_memory.domain.ports import ILLMProvider
from chat_memory.domain.repositories import ConversationRepository

BASE_TIME = datetime(2026, 1, 18, 21, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def mock_llm_api_key():
    """Mock LLM_API_KEY for all tests"""
    with patch("chat_memory.core.config.AppConfig.LLM_API_KEY", "test-key"):
        yield


class InMemoryConversationRepository(ConversationRepository):
    """
    In-memory реализация репозитория для unit тестов.

    seed() создает conversation в обход уникальности session_id,
    чтобы воспроизводить дубликаты.
    """

    def __init__(self):
        self.conversations: Dict[int, Conversation] = {}
        self.messages: Dict[int, Message] = {}
        self._conversation_ids = itertools.count(1)
        self._message_ids = itertools.count(1)

    def seed(self, session_id: str, summary: Optional[str] = None) -> Conversation:
        conversation_id = next(self._conversation_ids)
        conversation = Conversation(
            id=conversation_id,
            session_id=session_id,
            summary=summary,
            created_at=BASE_TIME + timedelta(seconds=conversation_id)
        )
        self.conversations[conversation_id] = conversation
        return conversation

    def seed_messages(self, conversation: Conversation, *entries) -> List[Message]:
        """entries: (role, content) или (role, content, model_name)"""
        saved = []
        for entry in entries:
            role, content, *rest = entry
            saved.append(self._store_message(conversation.id, MessageRole(role), content, rest[0] if rest else None))
        return saved

    def _store_message(self, conversation_id, role, content, model_name) -> Message:
        message_id = next(self._message_ids)
        message = Message(
            id=message_id,
            conversation_id=conversation_id,
            role=role,
            content=content,
            model_name=model_name,
            created_at=BASE_TIME + timedelta(milliseconds=message_id)
        )
        self.messages[message_id] = message
        return message

    async def find_all_by_session_id(self, session_id: str) -> List[Conversation]:
        return sorted(
            (conv for conv in self.conversations.values() if conv.session_id == session_id),
            key=lambda conv: conv.id
        )

    async def create(self, session_id: str) -> Conversation:
        if await self.find_all_by_session_id(session_id):
            raise DuplicateSessionError(session_id)
        return self.seed(session_id)

    async def delete_conversations(self, conversation_ids: Sequence[int]) -> int:
        deleted = 0
        for conversation_id in conversation_ids:
            if self.conversations.pop(conversation_id, None) is not None:
                deleted += 1
            for message_id in [m.id for m in self.messages.values() if m.conversation_id == conversation_id]:
                del self.messages[message_id]
        return deleted

    async def list_conversations(self) -> List[Conversation]:
        return sorted(self.conversations.values(), key=lambda conv: (conv.created_at, conv.id), reverse=True)

    async def add_message(
        self,
        conversation_id: int,
        role: MessageRole,
        content: str,
        model_name: Optional[str] = None
    ) -> Message:
        return self._store_message(conversation_id, role, content, model_name)

    async def list_messages(self, conversation_id: int) -> List[Message]:
        return sorted(
            (msg for msg in self.messages.values() if msg.conversation_id == conversation_id),
            key=lambda msg: (msg.created_at, msg.id)
        )

    async def list_messages_for(self, conversation_ids: Sequence[int]) -> Dict[int, List[Message]]:
        result = {}
        for conversation_id in conversation_ids:
            messages = await self.list_messages(conversation_id)
            if messages:
                result[conversation_id] = messages
        return result

    async def apply_compaction(
        self,
        conversation_id: int,
        summary: str,
        message_ids: Sequence[int]
    ) -> int:
        conversation = self.conversations[conversation_id]
        self.conversations[conversation_id] = conversation.model_copy(update={"summary": summary})
        deleted = 0
        for message_id in message_ids:
            message = self.messages.get(message_id)
            if message is not None and message.conversation_id == conversation_id:
                del self.messages[message_id]
                deleted += 1
        return deleted


@pytest.fixture
def memory_repository() -> InMemoryConversationRepository:
    return InMemoryConversationRepository()


@pytest.fixture
def llm_provider():
    """LLM провайдер: AsyncMock с контрактом ILLMProvider"""
    provider = AsyncMock(spec=ILLMProvider)
    provider.complete.return_value = "Mocked answer"
    return provider


def make_messages(*entries) -> List[Message]:
    """
    Построить историю из (role, content) без репозитория.

    Сообщениям присваиваются id по порядку и возрастающие created_at.
    """
    messages = []
    for index, (role, content) in enumerate(entries, start=1):
        messages.append(Message(
            id=index,
            conversation_id=1,
            role=MessageRole(role),
            content=content,
            created_at=BASE_TIME + timedelta(seconds=index)
        ))
    return messages


@pytest.fixture
def message_factory():
    return make_messages
