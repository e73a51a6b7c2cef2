"""
Role ORM Model
==============

Static reference data describing what a user may do. Two rows are expected:
``admin`` (id 1) and ``user`` (id 2). When the table cannot be read the
service layer falls back to :data:`DEFAULT_ROLES`.
"""

from datetime import datetime, timezone

from sqlalchemy import TEXT, VARCHAR, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from backend.database.config.connection_engine import declarativeBase

ADMIN_ROLE_ID = 1
USER_ROLE_ID = 2

DEFAULT_ROLES = [
    {"id": ADMIN_ROLE_ID, "name": "admin", "description": "Administrador do sistema"},
    {"id": USER_ROLE_ID, "name": "user", "description": "Usuário padrão"},
]
"""Hardcoded role table used when the backing store is unreachable or empty."""


class Role(declarativeBase):
    """
    ORM model for the `role` table.

    Attributes
    ----------
    id : int
        Primary key.
    name : str
        Unique role name (``admin`` or ``user``).
    description : str | None
        Human readable description shown in the admin panel.
    created_at : datetime
        Insertion timestamp (UTC).
    """

    __tablename__ = "role"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(VARCHAR(64), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(TEXT, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __init__(self, name: str, description: str | None = None, role_id: int | None = None):
        if role_id is not None:
            self.id = role_id
        self.name = name
        self.description = description
        self.created_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"Role: id:{self.id}, name: {self.name}"
