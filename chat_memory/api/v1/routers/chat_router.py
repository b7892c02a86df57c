"""
Chat роутер.

Вопросы к моделям, история и управление conversations.
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from ..schemas.chat_schemas import ErrorResponse
from ....application.dto import (
    ComparisonAnswer,
    ConversationDetails,
    ConversationSummary,
    MessageDTO,
    SingleModelAnswer,
)
from ....application.services import ChatService, ConversationService
from ....core.dependencies import get_chat_service, get_conversation_service
from ....core.errors import ChatMemoryError, ConflictExhaustedError, DomainError, ModelCallError

logger = logging.getLogger("chat-memory.api.chat")

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "/ask",
    response_model=Union[SingleModelAnswer, ComparisonAnswer],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    }
)
async def ask(
    question: str = Query(..., description="Вопрос пользователя"),
    model: str = Query("all", description="deepseek, grok, gemma или all"),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    chat_service: ChatService = Depends(get_chat_service)
):
    """
    Задать вопрос одной модели или всем сразу.

    Пример запроса:
        POST /chat/ask?question=What%20is%20Rust&model=grok&sessionId=s-1

    Пример ответа:
        {
            "model": "x-ai/grok-4-fast:free",
            "response": "Rust is ...",
            "sessionId": "s-1"
        }

    При ошибке возвращается {"error": "Error: ... Please try again or contact support."}
    """
    try:
        return await chat_service.ask(question, model=model, session_id=session_id)
    except ConflictExhaustedError as e:
        logger.error(f"Session conflict not resolved: {e.message}")
        return _error_response(503, e.message)
    except DomainError as e:
        logger.warning(f"Rejected ask request: {e.message}")
        return _error_response(400, e.message)
    except ModelCallError as e:
        logger.error(f"Model call failed: {e.message}")
        return _error_response(502, e.message)
    except ChatMemoryError as e:
        logger.error(f"Error processing ask request: {e.message}", exc_info=True)
        return _error_response(500, e.message)
    except Exception as e:
        logger.error(f"Unexpected error processing ask request: {e}", exc_info=True)
        return _error_response(500, str(e))


def _error_response(status_code: int, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.from_reason(reason).model_dump()
    )


@router.get("/history/{session_id}", response_model=List[MessageDTO])
async def get_history(
    session_id: str,
    include_summary: bool = Query(False, alias="includeSummary"),
    service: ConversationService = Depends(get_conversation_service)
) -> List[MessageDTO]:
    """
    История conversation в порядке добавления.

    С includeSummary=true первой записью идет сохраненное резюме
    (role "system", timestamp "summary").
    """
    try:
        history = [MessageDTO.from_entity(msg) for msg in await service.get_history(session_id)]

        if include_summary:
            conversation = await service.find_conversation(session_id)
            if conversation is not None and conversation.has_summary():
                history.insert(0, MessageDTO.summary_entry(conversation.summary))

        return history

    except Exception as e:
        logger.error(f"Error reading history for session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/history/{session_id}", response_class=PlainTextResponse)
async def clear_history(
    session_id: str,
    service: ConversationService = Depends(get_conversation_service)
) -> str:
    """Очистить историю session id"""
    try:
        await service.clear_history(session_id)
    except Exception as e:
        logger.error(f"Error clearing history for session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return f"Conversation history cleared for session: {session_id}"


@router.get("/conversations", response_model=List[ConversationSummary])
async def list_conversations(
    service: ConversationService = Depends(get_conversation_service)
) -> List[ConversationSummary]:
    """
    Все conversations, новые первыми.

    Пример ответа:
        [
            {
                "sessionId": "s-1",
                "createdAt": "2026-01-18T21:00:00+00:00",
                "messageCount": 4,
                "hasSummary": false,
                "title": "What is Rust?",
                "lastMessageAt": "2026-01-18T21:01:00+00:00",
                "models": ["x-ai/grok-4-fast:free"]
            }
        ]
    """
    try:
        return await service.list_conversations()
    except Exception as e:
        logger.error(f"Error listing conversations: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/conversations/{session_id}", response_model=ConversationDetails)
async def get_conversation(
    session_id: str,
    service: ConversationService = Depends(get_conversation_service)
) -> ConversationDetails:
    """
    Детали conversation.

    Raises:
        HTTPException 404: Conversation не найден
    """
    try:
        details = await service.get_conversation_details(session_id)
    except Exception as e:
        logger.error(f"Error reading conversation {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    if details is None:
        raise HTTPException(status_code=404, detail=f"Conversation {session_id} not found")
    return details


@router.delete("/conversations/{session_id}", response_class=PlainTextResponse)
async def delete_conversation(
    session_id: str,
    service: ConversationService = Depends(get_conversation_service)
) -> str:
    """Удалить conversation"""
    try:
        await service.delete_conversation(session_id)
    except Exception as e:
        logger.error(f"Error deleting conversation {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return f"Conversation deleted: {session_id}"
