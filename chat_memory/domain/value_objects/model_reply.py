"""
Value Object ответа одной модели в режиме сравнения.
"""

from typing import Literal, Dict

from pydantic import BaseModel, ConfigDict


class ModelReply(BaseModel):
    """
    Ответ одной модели, помеченный статусом.
    
    Ошибка одной модели не прерывает опрос остальных:
    она возвращается как ModelReply со status="error".
    """
    
    model_config = ConfigDict(frozen=True)
    
    model: str
    response: str
    status: Literal["success", "error"]
    
    @classmethod
    def success(cls, model: str, response: str) -> "ModelReply":
        return cls(model=model, response=response, status="success")
    
    @classmethod
    def error(cls, model: str, error: Exception) -> "ModelReply":
        reason = getattr(error, "message", None) or str(error) or type(error).__name__
        return cls(model=model, response=f"Error: {reason}", status="error")
    
    @property
    def is_success(self) -> bool:
        return self.status == "success"
    
    def to_dict(self) -> Dict[str, str]:
        return {"model": self.model, "response": self.response, "status": self.status}
