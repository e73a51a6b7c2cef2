"""
Database bootstrap script

Creates the schema, seeds the two built-in roles and the first administrator.
Safe to run repeatedly: existing roles and an existing admin email are left
alone.

Usage
-----
    python -m backend.init_db

Requires ``ADMIN_PASSWORD`` to create the administrator; without it only the
schema and roles are created.
"""

import logging

from backend.crypt.encrypt_decrypt import MIN_PASSWORD_LENGTH, EncryptionDec
from backend.database.config.config import settings
from backend.database.config.connection_engine import connection_engine, metadata
from backend.database.core import funcs
from backend.database.entities.role import ADMIN_ROLE_ID

import backend.database.entities  # noqa: F401  (registers every table on metadata)

logger = logging.getLogger(__name__)


def init_db() -> None:
    metadata.create_all(connection_engine)
    logger.info("Schema ready")

    created_roles = funcs.seed_roles()
    logger.info("Seeded %s role(s)", created_roles)

    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not set, skipping administrator creation")
        return
    if not EncryptionDec().is_valid_password(settings.ADMIN_PASSWORD):
        logger.error("ADMIN_PASSWORD must have at least %s characters, skipping administrator creation", MIN_PASSWORD_LENGTH)
        return
    if funcs.get_user_by_email(settings.ADMIN_EMAIL) is not None:
        logger.info("Administrator %s already exists", settings.ADMIN_EMAIL)
        return
    admin = funcs.create_user(
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        role_id=ADMIN_ROLE_ID,
    )
    logger.info("Administrator created: %s (%s)", admin["id"], admin["email"])


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    init_db()
