"""
Runtime configuration and database bootstrap.

Contents:
    - config: `Settings` (pydantic-settings) read from the process environment and `.env`; exposed as the `settings` singleton
    - connection_engine: SQLAlchemy URL, Engine, shared MetaData and the declarative base used by every entity
"""
