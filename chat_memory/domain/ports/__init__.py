"""
Ports (интерфейсы внешних систем) доменного слоя.
"""

from .llm_provider import ILLMProvider

__all__ = ["ILLMProvider"]
