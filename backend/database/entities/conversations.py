"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents a user-owned thread of messages
stored in the ``conversations`` table.

Key features
~~~~~~~~~~~~
- Integer identity primary key (``id``)
- Title generated from the first question (at most 40 characters)
- Foreign key to the owning user (``user_id`` → ``users.id``)
- **Query type** (``query_type``) used by the chat flow to pick the responder:
  ``"internet"`` → general legislative model, ``"laws"`` → internal laws endpoint.
  It is set at creation and never changed afterwards.
- ``updated_at`` is bumped whenever a message is appended; history lists are
  ordered on it.
"""

from datetime import datetime, timezone

from sqlalchemy import TEXT, VARCHAR, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.database.config.connection_engine import declarativeBase

QUERY_TYPE_INTERNET = "internet"
QUERY_TYPE_LAWS = "laws"


class Conversation(declarativeBase):
    """
    ORM model for the `conversations` table.

    Attributes
    ----------
    id : int
        Primary key. Unique identifier for the conversation.
    user_id : int
        Foreign key reference to the `users` table (the owner of the conversation).
    title : str
        Human-readable title of the conversation.
    query_type : str
        ``"internet"`` or ``"laws"``.
    created_at : datetime
        Creation timestamp (UTC).
    updated_at : datetime
        Timestamp of the last appended message (UTC).
    """

    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    query_type: Mapped[str] = mapped_column(VARCHAR(16), nullable=False, default=QUERY_TYPE_INTERNET)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __init__(self, user_id: int, title: str, query_type: str = QUERY_TYPE_INTERNET, last_updated=None):
        """
        Initialize a new Conversation object.

        Parameters
        ----------
        user_id : int
            The ID of the user who owns this conversation.
        title : str
            Title of the conversation.
        query_type : str
            ``"internet"`` (default) or ``"laws"``.
        last_updated : datetime | str | None
            Creation timestamp. Accepts datetime or ISO8601 string; defaults to now (UTC).
        """
        self.user_id = user_id
        self.title = title
        self.query_type = query_type or QUERY_TYPE_INTERNET
        if last_updated is None:
            last_updated = datetime.now(timezone.utc)
        elif isinstance(last_updated, str):
            last_updated = datetime.fromisoformat(last_updated)
        self.created_at = last_updated
        self.updated_at = last_updated

    def __str__(self) -> str:
        return f"User: id:{self.user_id}, conversation: {self.title}, updated: {self.updated_at}"
