"""
FastAPI Router — Admin panel
============================

User management, role listing, usage reports, environment settings and
process restart. Every route depends on `require_admin`: non-admin callers
get 403, unauthenticated callers 401/403 from the auth gate.
"""

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from backend.api import env_settings
from backend.api.env_settings import EnvSettingsError
from backend.api.models import (
    AdminUser,
    CurrentUser,
    EnvSettingsResponse,
    EnvSettingsSaved,
    EnvSettingsUpdate,
    RoleOut,
    StatsResponse,
    StatusMessage,
    UserCreate,
    UserStats,
    UserUpdate,
)
from backend.api.utils import require_admin
from backend.database.core import funcs
from backend.database.core.funcs import DuplicateEmailError, UnknownRoleError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


@router.get("/users", response_model=List[AdminUser])
def list_users():
    try:
        return funcs.list_users()
    except Exception:
        logger.exception("Admin list users error")
        raise HTTPException(status_code=500, detail="Erro ao carregar usuários")


@router.get("/users/{user_id}", response_model=AdminUser)
def get_user(user_id: int):
    user = funcs.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    return user


@router.post("/users", response_model=AdminUser, status_code=201)
def create_user(data: UserCreate):
    """Create an account. 400 when the email is taken or the role is unknown."""
    try:
        user = funcs.create_user(name=data.name, email=data.email, password=data.password, role_id=data.role_id)
    except (DuplicateEmailError, UnknownRoleError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Admin create user error (email=%s)", data.email)
        raise HTTPException(status_code=500, detail="Erro ao criar usuário")
    logger.info("Created user %s (%s)", user["id"], user["email"])
    return user


@router.put("/users/{user_id}", response_model=AdminUser)
def update_user(user_id: int, data: UserUpdate):
    try:
        user = funcs.update_user(
            user_id,
            name=data.name,
            email=data.email,
            password=data.password,
            role_id=data.role_id,
        )
    except (DuplicateEmailError, UnknownRoleError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Admin update user error (id=%s)", user_id)
        raise HTTPException(status_code=500, detail="Erro ao atualizar usuário")
    if user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    return user


@router.delete("/users/{user_id}", response_model=StatusMessage)
def delete_user(user_id: int, current_user: CurrentUser = Depends(require_admin)):
    """Delete an account with all its conversations and messages."""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Não é possível excluir o próprio usuário")
    try:
        deleted = funcs.delete_user(user_id)
    except Exception:
        logger.exception("Admin delete user error (id=%s)", user_id)
        raise HTTPException(status_code=500, detail="Erro ao excluir usuário")
    if not deleted:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    return {"message": "Usuário excluído com sucesso"}


@router.get("/roles", response_model=List[RoleOut])
def list_roles():
    return funcs.get_roles()


@router.get("/stats", response_model=StatsResponse)
def stats():
    try:
        return funcs.get_stats()
    except Exception:
        logger.exception("Admin stats error")
        raise HTTPException(status_code=500, detail="Erro ao carregar estatísticas")


@router.get("/user-stats", response_model=List[UserStats])
def user_stats():
    try:
        return funcs.get_user_stats()
    except Exception:
        logger.exception("Admin user stats error")
        raise HTTPException(status_code=500, detail="Erro ao carregar estatísticas de usuários")


@router.get("/env-settings", response_model=EnvSettingsResponse)
def get_env_settings():
    try:
        return env_settings.read_env_settings()
    except Exception:
        logger.exception("Env settings read error")
        raise HTTPException(status_code=500, detail="Erro ao carregar configurações")


@router.put("/env-settings", response_model=EnvSettingsSaved)
def put_env_settings(data: EnvSettingsUpdate):
    """Write a new settings version. Takes effect after a server restart."""
    try:
        version = env_settings.write_env_settings(data.settings)
    except EnvSettingsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Env settings write error")
        raise HTTPException(status_code=500, detail="Erro ao salvar configurações")
    return {
        "message": "Configurações salvas. Reinicie o servidor para aplicar.",
        "version": version,
        "restart_required": True,
    }


@router.post("/restart-server", response_model=StatusMessage)
def restart_server(background_tasks: BackgroundTasks, current_user: CurrentUser = Depends(require_admin)):
    """Terminate the process once the response is sent; the supervisor restarts it."""
    logger.warning("Server restart requested by user %s", current_user.id)
    background_tasks.add_task(env_settings.terminate_process)
    return {"message": "Servidor será reiniciado"}
