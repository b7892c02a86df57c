"""
API схемы для chat endpoints.
"""

from pydantic import BaseModel, Field

SUPPORT_HINT = "Please try again or contact support."


class ErrorResponse(BaseModel):
    """
    Ответ /chat/ask при ошибке.
    
    Пример:
        {"error": "Error: Unsupported model: gpt. Available: deepseek, grok, gemma, all. Please try again or contact support."}
    """
    
    error: str = Field(description="Описание ошибки")
    
    @classmethod
    def from_reason(cls, reason: str) -> "ErrorResponse":
        return cls(error=f"Error: {reason}. {SUPPORT_HINT}")
