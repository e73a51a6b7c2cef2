"""
User ORM Model
==============

The ``User`` ORM model represents an account of the legislative assistant. It
maps to the ``users`` table. Accounts are created by an administrator (or the
bootstrap script); end users never self-register.

Key features
~~~~~~~~~~~~
- Integer identity primary key (``id``)
- Unique email used as login
- bcrypt password hash
- Role reference (``role_id`` → ``role.id``)
- Creation / update timestamps (UTC)
"""

from datetime import datetime, timezone

from sqlalchemy import TEXT, VARCHAR, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.database.config.connection_engine import declarativeBase


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    id : int
        Primary key. Unique identifier for the user.
    email : str
        Email address of the user (unique, max 255 chars).
    password : str
        Hashed password of the user.
    name : str
        Display name.
    role_id : int
        Foreign key to the `role` table.
    created_at : datetime
        When the account was created.
    updated_at : datetime
        Last time an administrator edited the account.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key of the user."""

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    """Email address of the user (max length 255)."""

    password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """Hashed password of the user."""

    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)
    """Display name of the user."""

    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("role.id"), nullable=False)
    """Role assigned to the user."""

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __init__(self, email: str, password: str, name: str, role_id: int, date_created_on=None):
        """
        Initialize a new User object.

        Parameters
        ----------
        email : str
            Email address of the user.
        password : str
            Plaintext password; the DAO hashes it before insert.
        name : str
            Display name.
        role_id : int
            Identifier of the assigned role.
        date_created_on : datetime | str | None
            Creation timestamp. Accepts datetime or ISO8601 string; defaults to now (UTC).
        """
        self.email = email
        self.password = password
        self.name = name
        self.role_id = role_id
        if date_created_on is None:
            date_created_on = datetime.now(timezone.utc)
        elif isinstance(date_created_on, str):
            date_created_on = datetime.fromisoformat(date_created_on)
        self.created_at = date_created_on
        self.updated_at = date_created_on

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, role_id: {self.role_id}"
