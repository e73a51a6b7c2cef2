"""
Conversation DAO

Purpose
-------
Provides a thin data-access layer for the `Conversation` ORM entity:
- Create conversations
- Query by user, or by id scoped to its owner
- Bump `updated_at` when a message is appended
- Bulk delete for the user-deletion cascade

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO). Transaction boundaries live in the service layer.
- There is no rename/update of title or query type: both are fixed at creation.

Error Handling
--------------
- Methods log the failing operation and re-raise.
"""

import logging
from datetime import datetime

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from backend.database.entities.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def createConversation(self, session: Session, conversation: Conversation) -> Conversation:
        """
        Create a new conversation record.

        Returns
        -------
        Conversation
            The flushed row, with its server-assigned ``id``.
        """
        try:
            session.add(conversation)
            session.flush()
            return conversation
        except Exception:
            logger.error("Error in ConversationDao.createConversation (user_id=%s)", conversation.user_id)
            raise

    def fetchConversationByUserId(self, session: Session, user_id: int) -> list[Conversation]:
        """
        Fetch all conversations belonging to a specific user,
        ordered by most recently updated.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.user_id == user_id)
                .order_by(desc(Conversation.updated_at), desc(Conversation.id))
                .all()
            )
        except Exception:
            logger.error("Error in ConversationDao.fetchConversationByUserId (user_id=%s)", user_id)
            raise

    def fetchConversationByIdAndUserId(
        self, session: Session, conversation_id: int, user_id: int
    ) -> Conversation | None:
        """
        Fetch one conversation, only if it belongs to ``user_id``.

        Returns
        -------
        Conversation | None
            None when the id does not exist or is owned by someone else.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .filter(Conversation.user_id == user_id)
                .first()
            )
        except Exception:
            logger.error(
                "Error in ConversationDao.fetchConversationByIdAndUserId (id=%s, user_id=%s)",
                conversation_id,
                user_id,
            )
            raise

    def fetchConversationIdsByUserId(self, session: Session, user_id: int) -> list[int]:
        try:
            rows = session.query(Conversation.id).filter(Conversation.user_id == user_id).all()
            return [row.id for row in rows]
        except Exception:
            logger.error("Error in ConversationDao.fetchConversationIdsByUserId (user_id=%s)", user_id)
            raise

    def updateConversationByDate(self, session: Session, conversation_id: int, timestamp: datetime) -> int:
        """
        Update the last updated timestamp of a conversation.

        Returns
        -------
        int
            Number of rows touched (0 if the conversation does not exist).
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .update({Conversation.updated_at: timestamp}, synchronize_session=False)
            )
        except Exception:
            logger.error("Error in ConversationDao.updateConversationByDate (id=%s)", conversation_id)
            raise

    def deleteConversationsByUserId(self, session: Session, user_id: int) -> int:
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except Exception:
            logger.error("Error in ConversationDao.deleteConversationsByUserId (user_id=%s)", user_id)
            raise

    def countConversations(self, session: Session) -> int:
        try:
            return session.query(func.count(Conversation.id)).scalar() or 0
        except Exception:
            logger.error("Error in ConversationDao.countConversations")
            raise
