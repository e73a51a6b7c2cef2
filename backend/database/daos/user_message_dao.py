"""
Messages DAO

Purpose
-------
Data-access layer for the `Message` ORM entity. Provides:
- Message creation (append-only)
- Retrieval by conversation (chronological)
- Bulk delete, used only by the user-deletion cascade

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Ordering is ``created_at`` then ``id``, so two turns written within the
  same clock tick still come back in insertion order.
"""

import logging

from sqlalchemy import asc, func
from sqlalchemy.orm import Session

from backend.database.entities.messages import Message

logger = logging.getLogger(__name__)


class MessagesDao:
    """
    Data Access Object (DAO) for conversation messages.
    """

    def createMessage(self, session: Session, message: Message) -> Message:
        """
        Append a message to its conversation.

        Returns
        -------
        Message
            The flushed row, with its server-assigned ``id``.
        """
        try:
            session.add(message)
            session.flush()
            return message
        except Exception:
            logger.error("Error in MessagesDao.createMessage (conversation_id=%s)", message.conversation_id)
            raise

    def fetchMessagesByConversationId(self, session: Session, conversation_id: int) -> list[Message]:
        """
        Fetch all messages in a conversation, ordered by creation time (ascending).
        """
        try:
            return (
                session.query(Message)
                .filter(Message.conversation_id == conversation_id)
                .order_by(asc(Message.created_at), asc(Message.id))
                .all()
            )
        except Exception:
            logger.error("Error in MessagesDao.fetchMessagesByConversationId (conversation_id=%s)", conversation_id)
            raise

    def deleteMessagesByConversationIds(self, session: Session, conversation_ids: list[int]) -> int:
        if not conversation_ids:
            return 0
        try:
            return (
                session.query(Message)
                .filter(Message.conversation_id.in_(conversation_ids))
                .delete(synchronize_session=False)
            )
        except Exception:
            logger.error("Error in MessagesDao.deleteMessagesByConversationIds (ids=%s)", conversation_ids)
            raise

    def countMessages(self, session: Session) -> int:
        try:
            return session.query(func.count(Message.id)).scalar() or 0
        except Exception:
            logger.error("Error in MessagesDao.countMessages")
            raise
