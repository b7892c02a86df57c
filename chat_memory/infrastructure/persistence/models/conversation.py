"""
SQLAlchemy models for conversation and message persistence.

Contains:
- ConversationModel: Conversation keyed by session id
- MessageModel: Individual messages in a conversation
"""
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ConversationModel(Base):
    """SQLAlchemy model for a conversation"""
    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Summary of compacted history")

    messages = relationship("MessageModel", back_populates="conversation",
                            cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("session_id", name="uq_conversations_session_id"),
    )


class MessageModel(Base):
    """SQLAlchemy model for individual messages"""
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[int] = mapped_column(Integer, ForeignKey("conversations.id", ondelete="CASCADE"),
                                                 nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    model_name: Mapped[str | None] = mapped_column(String(255), nullable=True)  # Only for assistant messages

    conversation = relationship("ConversationModel", back_populates="messages")

    __table_args__ = (
        Index("idx_conversation_created", "conversation_id", "created_at", "id"),
        CheckConstraint(
            "role IN ('system', 'user', 'assistant')",
            name="valid_role"
        ),
    )
