"""
Base Entity class for the domain layer.

Entities are identified by their database identity, not by their attributes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """
    Base class for domain entities.
    
    Two persisted entities with the same id and type are equal even if
    their attributes differ. Entities without an id (not yet persisted)
    fall back to attribute comparison.
    
    Attributes:
        id: Database identity (None until persisted)
        created_at: Creation timestamp (UTC)
    """
    
    model_config = ConfigDict(arbitrary_types_allowed=True)
    
    id: Optional[int] = Field(default=None, description="Database identity")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)"
    )
    
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity) or type(self) != type(other):
            return False
        if self.id is None or other.id is None:
            return super().__eq__(other)
        return self.id == other.id
    
    def __hash__(self) -> int:
        return hash((self.id, type(self)))
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"
