"""
Role DAO

Read access to the ``role`` reference table, plus the insert used by the
bootstrap script.
"""

import logging

from sqlalchemy.orm import Session

from backend.database.entities.role import Role

logger = logging.getLogger(__name__)


class RoleDao:

    def fetchRoles(self, session: Session) -> list[Role]:
        try:
            return session.query(Role).order_by(Role.id).all()
        except Exception:
            logger.error("Error in RoleDao.fetchRoles")
            raise

    def fetchRoleById(self, session: Session, role_id: int) -> Role | None:
        try:
            return session.query(Role).filter(Role.id == role_id).first()
        except Exception:
            logger.error("Error in RoleDao.fetchRoleById (id=%s)", role_id)
            raise

    def createRole(self, session: Session, role: Role) -> Role:
        try:
            session.add(role)
            session.flush()
            return role
        except Exception:
            logger.error("Error in RoleDao.createRole (name=%s)", role.name)
            raise
