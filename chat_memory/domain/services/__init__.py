"""
Domain Services.

Бизнес-логика, не принадлежащая одной сущности.
"""

from .session_resolver import SessionResolver
from .summarizer import Summarizer
from .context_builder import ContextBuilder

__all__ = [
    "SessionResolver",
    "Summarizer",
    "ContextBuilder",
]
