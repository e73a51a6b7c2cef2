"""
Message ORM Model
=================

A single turn within a conversation. Messages are append-only: there is no
update or delete path other than the cascade run when the owning user is
removed. Within a conversation they are ordered by ``created_at`` then ``id``.
"""

from datetime import datetime, timezone

from sqlalchemy import TEXT, VARCHAR, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.database.config.connection_engine import declarativeBase

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


class Message(declarativeBase):
    """
    ORM model for the `messages` table.

    Attributes
    ----------
    id : int
        Primary key.
    conversation_id : int
        Foreign key reference to the `conversations` table.
    role : str
        ``"user"`` or ``"assistant"``.
    content : str
        Text of the message.
    created_at : datetime
        Timestamp when the message was created (UTC).
    """

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conversation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("conversations.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(VARCHAR(16), nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __init__(self, conversation_id: int, role: str, content: str, date_created_on=None):
        self.conversation_id = conversation_id
        self.role = role
        self.content = content
        if date_created_on is None:
            date_created_on = datetime.now(timezone.utc)
        elif isinstance(date_created_on, str):
            date_created_on = datetime.fromisoformat(date_created_on)
        self.created_at = date_created_on

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.conversation_id}, "
            f"role: {self.role}, "
            f"message: {self.content}, "
            f"time_created: {self.created_at}"
        )
