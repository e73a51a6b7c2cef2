"""
Entities Package — SQLAlchemy 2.0 ORM Models
============================================

The `entities` package defines the ORM models of the application, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings.
These classes form the persistence backbone and are consumed by DAOs
(`daos` package).

Conventions
-----------
- Integer identity primary keys
- Timezone-aware timestamps (UTC), assigned on the Python side
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`
- Clear foreign keys for relational integrity

Contents
--------
- Role           : reference table (admin / user) with hardcoded fallback
- User           : account with unique email, bcrypt hash and role reference
- Conversation   : titled thread owned by one user, tagged with a query type
- Message        : append-only turn (``user`` | ``assistant``) of a conversation

Importing this package registers every table on the shared ``metadata`` so
``metadata.create_all`` sees the whole schema.
"""

from backend.database.entities.role import Role
from backend.database.entities.user import User
from backend.database.entities.conversations import Conversation
from backend.database.entities.messages import Message

__all__ = ["Role", "User", "Conversation", "Message"]
