"""
Value Object одной записи контекста LLM.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict

from ..entities.message import Message, MessageRole


class ContextMessage(BaseModel):
    """
    Запись контекста, отправляемого в модель: {role, content}.
    
    Пример:
        >>> ContextMessage.user("Hello").to_dict()
        {'role': 'user', 'content': 'Hello'}
    """
    
    model_config = ConfigDict(frozen=True)
    
    role: MessageRole
    content: str
    
    @classmethod
    def user(cls, content: str) -> "ContextMessage":
        return cls(role=MessageRole.USER, content=content)
    
    @classmethod
    def system(cls, content: str) -> "ContextMessage":
        return cls(role=MessageRole.SYSTEM, content=content)
    
    @classmethod
    def from_message(cls, message: Message) -> "ContextMessage":
        return cls(role=message.role, content=message.content)
    
    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}
