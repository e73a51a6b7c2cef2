"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package provides the Data Access Layer for the application.
It encapsulates all interactions with SQLAlchemy ORM entities, providing
clean CRUD APIs for the service layer while hiding direct query details.

Conventions
-----------
- SQLAlchemy 2.0 typed mappings (Mapped[...] / mapped_column)
- Session lifecycle (open/commit/rollback) is handled by callers
- Lookups return ``None`` (or an empty list) when nothing matches
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- UserDao
    * Creates users with password hashing
    * Fetches users by id or email, lists, updates and deletes them
    * Aggregates per-user activity for the admin reports

- RoleDao
    * Reads the role reference table; inserts roles for bootstrap

- ConversationDao
    * Creates conversations, lists them per user (newest first)
    * Fetches a conversation scoped to its owner
    * Bumps `updated_at`; bulk delete for the user cascade

- MessagesDao
    * Appends messages, lists them chronologically
    * Bulk delete for the user cascade
"""
