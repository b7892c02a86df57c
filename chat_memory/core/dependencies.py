"""
FastAPI dependency injection providers.

Provides singleton instances and factory functions for services.
"""
from typing import Optional

from fastapi import Depends

from .config import AppConfig
from ..application.services import ChatService, ConversationService
from ..domain.ports import ILLMProvider
from ..domain.repositories import ConversationRepository
from ..domain.services import ContextBuilder, SessionResolver, Summarizer
from ..infrastructure.llm import OpenRouterClient
from ..infrastructure.persistence.database import get_session_factory
from ..infrastructure.persistence.repositories import ConversationRepositoryImpl

_llm_provider: Optional[ILLMProvider] = None


def get_llm_provider() -> ILLMProvider:
    """Get LLM client singleton (circuit breaker state lives in it)"""
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = OpenRouterClient()
    return _llm_provider


async def close_llm_provider():
    """Close LLM client singleton on shutdown"""
    global _llm_provider
    if _llm_provider is not None:
        await _llm_provider.close()
        _llm_provider = None


def get_repository() -> ConversationRepository:
    """Create repository bound to the initialized session factory"""
    return ConversationRepositoryImpl(get_session_factory())


def get_session_resolver(
    repository: ConversationRepository = Depends(get_repository),
) -> SessionResolver:
    return SessionResolver(repository)


def get_summarizer(
    llm_provider: ILLMProvider = Depends(get_llm_provider),
) -> Summarizer:
    return Summarizer(
        llm_provider,
        model=AppConfig.SUMMARIZATION_MODEL,
        include_previous_summary=AppConfig.SUMMARY_INCLUDE_PREVIOUS
    )


def get_context_builder(
    repository: ConversationRepository = Depends(get_repository),
    resolver: SessionResolver = Depends(get_session_resolver),
    summarizer: Summarizer = Depends(get_summarizer),
) -> ContextBuilder:
    return ContextBuilder(repository, resolver, summarizer)


def get_conversation_service(
    repository: ConversationRepository = Depends(get_repository),
    resolver: SessionResolver = Depends(get_session_resolver),
    context_builder: ContextBuilder = Depends(get_context_builder),
) -> ConversationService:
    """
    Create ConversationService instance with dependencies.

    Returns:
        ConversationService instance
    """
    return ConversationService(repository, resolver, context_builder)


def get_chat_service(
    conversation_service: ConversationService = Depends(get_conversation_service),
    llm_provider: ILLMProvider = Depends(get_llm_provider),
) -> ChatService:
    """
    Create ChatService instance with dependencies.

    Returns:
        ChatService instance
    """
    return ChatService(conversation_service, llm_provider)
