"""
Value Objects доменного слоя.
"""

from .context_message import ContextMessage
from .built_context import BuiltContext
from .compaction_result import CompactionResult
from .model_reply import ModelReply

__all__ = [
    "ContextMessage",
    "BuiltContext",
    "CompactionResult",
    "ModelReply",
]
