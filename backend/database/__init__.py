"""
The `database` package is responsible for all interactions with the application's database.
It provides configuration, entity definitions, CRUD operations, and utility functions
that ensure smooth integration between the application and its data layer.

Contents:
    - config:
        Settings object and the SQLAlchemy engine built from it.

    - entities:
        SQLAlchemy entity models: roles, users, conversations, messages.

    - daos:
        Data Access Objects (DAOs) providing CRUD operations for the entities.

    - core:
        Service functions that connect application routers with the database
        and orchestrate higher-level operations (cascading delete, reports).

    - helpers:
        The `@transactional` decorator and session propagation.
"""
