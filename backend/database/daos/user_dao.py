"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation with password hashing
- Lookup by id or email (``None`` when nothing matches)
- Listing, update and delete
- Per-user activity aggregates for the admin reports

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller.
- The DAO never commits: the `@transactional` service layer owns the
  transaction boundary.
- Passwords are hashed using `EncryptionDec.hash_password(...)` before insert
  and on password change.

Error Handling
--------------
- Each method logs the failing operation and re-raises, so upper layers decide
  the error policy.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import desc, distinct, func
from sqlalchemy.orm import Session

from backend.crypt.encrypt_decrypt import EncryptionDec
from backend.database.entities.conversations import Conversation
from backend.database.entities.messages import Message
from backend.database.entities.user import User

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def createUser(self, session: Session, user_data: User) -> User:
        """
        Create a new user with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity whose ``password`` still holds the plaintext.

        Returns
        -------
        User
            The flushed row, with its server-assigned ``id``.
        """
        try:
            enc = EncryptionDec()
            user_data.password = enc.hash_password(text=user_data.password)
            session.add(user_data)
            session.flush()
            return user_data
        except Exception:
            logger.error("Error in UserDao.createUser (email=%s)", user_data.email)
            raise

    def fetchUserById(self, session: Session, user_id: int) -> User | None:
        """Return the user with that id, or None."""
        try:
            return session.query(User).filter(User.id == user_id).first()
        except Exception:
            logger.error("Error in UserDao.fetchUserById (id=%s)", user_id)
            raise

    def fetchUserByEmail(self, session: Session, email: str) -> User | None:
        """Return the user owning that email, or None."""
        try:
            return session.query(User).filter(User.email == email).first()
        except Exception:
            logger.error("Error in UserDao.fetchUserByEmail (email=%s)", email)
            raise

    def fetchUsers(self, session: Session) -> list[User]:
        """Return every user, newest account first."""
        try:
            return session.query(User).order_by(desc(User.created_at), desc(User.id)).all()
        except Exception:
            logger.error("Error in UserDao.fetchUsers")
            raise

    def updateUser(self, session: Session, user: User, **fields) -> User:
        """
        Apply the given fields to a user and bump ``updated_at``.

        Supported fields: ``name``, ``email``, ``role_id``, ``password``
        (plaintext, hashed here). ``None`` values are ignored.
        """
        try:
            for field in ("name", "email", "role_id"):
                if fields.get(field) is not None:
                    setattr(user, field, fields[field])
            if fields.get("password"):
                user.password = EncryptionDec().hash_password(text=fields["password"])
            user.updated_at = datetime.now(timezone.utc)
            session.flush()
            return user
        except Exception:
            logger.error("Error in UserDao.updateUser (id=%s)", user.id)
            raise

    def deleteUser(self, session: Session, user_id: int) -> int:
        """Delete the user row. Returns the number of deleted rows."""
        try:
            return session.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        except Exception:
            logger.error("Error in UserDao.deleteUser (id=%s)", user_id)
            raise

    def countUsers(self, session: Session) -> int:
        try:
            return session.query(func.count(User.id)).scalar() or 0
        except Exception:
            logger.error("Error in UserDao.countUsers")
            raise

    def fetchMostActiveUsers(self, session: Session, limit: int = 5):
        """
        Users ranked by number of conversations.

        Returns
        -------
        list[Row]
            Rows of ``(id, name, email, count)``, users without conversations excluded.
        """
        try:
            conversation_count = func.count(Conversation.id).label("count")
            return (
                session.query(User.id, User.name, User.email, conversation_count)
                .join(Conversation, Conversation.user_id == User.id)
                .group_by(User.id, User.name, User.email)
                .order_by(desc(conversation_count), User.id)
                .limit(limit)
                .all()
            )
        except Exception:
            logger.error("Error in UserDao.fetchMostActiveUsers")
            raise

    def fetchUserActivity(self, session: Session):
        """
        Per-user conversation / message counts and last activity.

        Returns
        -------
        list[Row]
            Rows of ``(id, name, email, role_id, conversations, messages, last_activity)``.
        """
        try:
            return (
                session.query(
                    User.id,
                    User.name,
                    User.email,
                    User.role_id,
                    func.count(distinct(Conversation.id)).label("conversations"),
                    func.count(Message.id).label("messages"),
                    func.max(Conversation.updated_at).label("last_activity"),
                )
                .outerjoin(Conversation, Conversation.user_id == User.id)
                .outerjoin(Message, Message.conversation_id == Conversation.id)
                .group_by(User.id, User.name, User.email, User.role_id)
                .order_by(User.id)
                .all()
            )
        except Exception:
            logger.error("Error in UserDao.fetchUserActivity")
            raise
