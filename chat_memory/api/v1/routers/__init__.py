"""
API v1 роутеры.
"""

from .chat_router import router as chat_router
from .health_router import router as health_router

__all__ = [
    "chat_router",
    "health_router",
]
