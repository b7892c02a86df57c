"""
DTO ответов на вопрос пользователя.
"""

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...domain.value_objects import ModelReply


class SingleModelAnswer(BaseModel):
    """Ответ одной модели"""
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())
    
    model: str
    response: str
    session_id: str


class ModelReplyDTO(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    
    model: str
    response: str
    status: str


class ComparisonAnswer(BaseModel):
    """
    Ответы всех моделей на один вопрос.
    
    Атрибуты:
        question: Вопрос пользователя
        session_id: Session id
        responses: model -> текст ответа (или "Error: ...")
        model_responses: Ответы по порядку моделей со статусом
        timestamp: Время ответа (ISO 8601)
    """
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())
    
    question: str
    session_id: str
    responses: Dict[str, str] = Field(default_factory=dict)
    model_responses: List[ModelReplyDTO] = Field(default_factory=list)
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    
    @classmethod
    def from_replies(
        cls,
        question: str,
        session_id: str,
        replies: List[ModelReply]
    ) -> "ComparisonAnswer":
        return cls(
            question=question,
            session_id=session_id,
            responses={reply.model: reply.response for reply in replies},
            model_responses=[ModelReplyDTO(**reply.to_dict()) for reply in replies]
        )
