"""
Database Transaction Management
===============================

Utilities for managing SQLAlchemy sessions with a context variable and a
decorator-based transaction wrapper.

A function decorated with ``@transactional`` receives the ``session`` as its first
positional argument; callers omit it. The outermost call opens the session, commits on success
and rolls back on any exception; nested decorated calls reuse the same
session, so a whole call tree is one unit of work. This is what makes the
user-deletion cascade (messages → conversations → user) atomic.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of existing sessions
- Automatic commit and rollback handling
- Clean session closure after execution
"""

import contextvars
import logging
from functools import wraps

from sqlalchemy.orm import sessionmaker

from backend.database.config.connection_engine import connection_engine

logger = logging.getLogger(__name__)

SessionFactory = sessionmaker(bind=connection_engine, expire_on_commit=False)
"""Session factory bound to the shared engine. Rows stay readable after commit."""

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    Ensures that:
    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed.

    Parameters
    ----------
    func : callable
        The function to wrap. Its first parameter must be `session`.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.

    Example
    -------
    >>> @transactional
    ... def count_users(session: Session, role_id: int):
    ...     return session.query(User).filter(User.role_id == role_id).count()
    ...
    >>> count_users(2)
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session is not None:
            return func(session, *args, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(session, *args, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            logger.debug("Rolling back transaction of %s", func.__name__)
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
