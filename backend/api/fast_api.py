"""
FastAPI Router — Auth • Chat (Legislative Assistant)
====================================================

Purpose
-------
Defines the HTTP API for:
- Authentication: login, logout, current user
- Chat: submit a question, list the history, open one conversation

Key Notes
---------
- Input validation via Pydantic models in `backend.api.models`.
- Auth: `Authorization: Bearer <JWT>` checked by `get_current_user`.
- Internal errors are logged with context and collapsed into a generic
  Portuguese message; only not-found cases get a specific status.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from backend.api import chat_orchestrator
from backend.api.chat_orchestrator import ConversationNotFoundError
from backend.api.models import (
    ChatAnswer,
    ChatQuery,
    ConversationDetail,
    ConversationSummary,
    CurrentUser,
    LoginResponse,
    StatusMessage,
    UserCredentials,
    UserPublic,
)
from backend.api.utils import create_access_token, get_current_user
from backend.database.core.funcs import authenticate_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
"""Creates the FastAPI router in which we define its routes"""


@router.post("/auth/login", response_model=LoginResponse)
def login(data: UserCredentials):
    """Authenticate a user and return a signed bearer token.

    Request body:
        UserCredentials {email, password}

    Response:
        200: {token, user: {id, name, email, role}}
        401: invalid credentials (unknown email and wrong password look the same)
    """
    user = authenticate_user(email=data.email, password=data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Credenciais inválidas")

    token = create_access_token({"sub": str(user["id"]), "email": user["email"]})
    logger.info("User %s logged in", user["id"])
    return {
        "token": token,
        "user": {"id": user["id"], "name": user["name"], "email": user["email"], "role": user["role"]},
    }


@router.post("/auth/logout", response_model=StatusMessage)
def logout(current_user: CurrentUser = Depends(get_current_user)):
    """Tokens are stateless: the client discards its token."""
    return {"message": "Logout realizado com sucesso"}


@router.get("/auth/user", response_model=UserPublic)
def get_user_profile(current_user: CurrentUser = Depends(get_current_user)):
    """Return the profile of the authenticated caller."""
    return current_user


@router.post("/chat/query", response_model=ChatAnswer)
async def chat_query(data: ChatQuery, current_user: CurrentUser = Depends(get_current_user)):
    """Main chat endpoint.

    Creates the conversation when `conversationId` is omitted, stores both
    turns and returns the assistant's answer.

    Response:
        200: {answer, conversation_id, query_type}
        404: conversationId not owned by the caller
        500: any persistence or AI failure
    """
    try:
        return await chat_orchestrator.submit_query(
            user_id=current_user.id,
            question=data.question,
            conversation_id=data.conversationId,
            query_type=data.queryType,
        )
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversa não encontrada")
    except Exception:
        logger.exception(
            "Chat query error (user=%s, conversation=%s, type=%s)",
            current_user.id,
            data.conversationId,
            data.queryType,
        )
        raise HTTPException(status_code=500, detail="Erro ao processar consulta")


@router.get("/chat/history", response_model=List[ConversationSummary])
def chat_history(current_user: CurrentUser = Depends(get_current_user)):
    """List the caller's conversations, most recent first."""
    try:
        return chat_orchestrator.list_conversations(current_user.id)
    except Exception:
        logger.exception("History fetch error (user=%s)", current_user.id)
        raise HTTPException(status_code=500, detail="Erro ao carregar histórico")


@router.get("/chat/history/{conversation_id}", response_model=ConversationDetail)
def chat_conversation(conversation_id: int, current_user: CurrentUser = Depends(get_current_user)):
    """Open one of the caller's conversations with its messages in order."""
    try:
        return chat_orchestrator.get_conversation(conversation_id, current_user.id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversa não encontrada")
    except Exception:
        logger.exception("Conversation fetch error (user=%s, conversation=%s)", current_user.id, conversation_id)
        raise HTTPException(status_code=500, detail="Erro ao carregar conversa")
