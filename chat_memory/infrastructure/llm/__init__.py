"""
LLM провайдеры.
"""

from .client import OpenRouterClient

__all__ = [
    "OpenRouterClient",
]
