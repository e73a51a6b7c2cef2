"""
Service-layer operations for accounts, roles, conversations, messages and reports.

Functions wrapped with the `@transactional` decorator receive an injected
`session: Session` and run as one unit of work: committed on success, rolled
back on any exception. Results are plain dictionaries, ready to be validated by
the response models of `backend.api.models`.

Lookups return ``None`` when no row matches; every other database error
propagates to the caller unchanged.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.crypt.encrypt_decrypt import EncryptionDec
from backend.database.daos.conversation_dao import ConversationDao
from backend.database.daos.role_dao import RoleDao
from backend.database.daos.user_dao import UserDao
from backend.database.daos.user_message_dao import MessagesDao
from backend.database.entities.conversations import QUERY_TYPE_INTERNET, Conversation
from backend.database.entities.messages import Message
from backend.database.entities.role import DEFAULT_ROLES, USER_ROLE_ID, Role
from backend.database.entities.user import User
from backend.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)

MOST_ACTIVE_USERS_LIMIT = 5


class DuplicateEmailError(Exception):
    """Raised when an email is already used by another account."""


class UnknownRoleError(Exception):
    """Raised when a role id has no row in the role table."""


# -----------------------
# Serialization helpers
# -----------------------

def _fallback_role_name(role_id: int) -> str | None:
    for role in DEFAULT_ROLES:
        if role["id"] == role_id:
            return role["name"]
    return None


def _role_name(session: Session, role_id: int) -> str:
    role = RoleDao().fetchRoleById(session, role_id)
    if role is not None:
        return role.name
    return _fallback_role_name(role_id) or "user"


def _user_to_dict(session: Session, user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role_id": user.role_id,
        "role": _role_name(session, user.role_id),
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def _conversation_to_dict(conversation: Conversation) -> dict:
    return {
        "id": conversation.id,
        "user_id": conversation.user_id,
        "title": conversation.title,
        "query_type": conversation.query_type,
        "created_at": conversation.created_at,
        "updated_at": conversation.updated_at,
    }


def _message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "role": message.role,
        "content": message.content,
        "created_at": message.created_at,
    }


def _check_role_exists(session: Session, role_id: int) -> None:
    if RoleDao().fetchRoleById(session, role_id) is None:
        raise UnknownRoleError(f"Função {role_id} não existe")


# -----------------------
# Roles
# -----------------------

@transactional
def _fetch_roles(session: Session) -> list[dict]:
    return [
        {"id": role.id, "name": role.name, "description": role.description}
        for role in RoleDao().fetchRoles(session)
    ]


def get_roles() -> list[dict]:
    """
    List the role reference table.

    Falls back to the hardcoded admin/user pair when the table is empty or the
    store cannot be read, so the admin panel always has something to offer.
    """
    try:
        roles = _fetch_roles()
    except SQLAlchemyError:
        logger.warning("Role table unavailable, using built-in roles", exc_info=True)
        return [dict(role) for role in DEFAULT_ROLES]
    if not roles:
        logger.warning("Role table is empty, using built-in roles")
        return [dict(role) for role in DEFAULT_ROLES]
    return roles


@transactional
def resolve_role_name(session: Session, role_id: int) -> str:
    """Name of a role id; built-in names when the row is missing, ``user`` as last resort."""
    return _role_name(session, role_id)


@transactional
def seed_roles(session: Session) -> int:
    """Insert the built-in roles that are missing. Returns how many were created."""
    role_dao = RoleDao()
    created = 0
    for role in DEFAULT_ROLES:
        if role_dao.fetchRoleById(session, role["id"]) is None:
            role_dao.createRole(session, Role(name=role["name"], description=role["description"], role_id=role["id"]))
            created += 1
    return created


# -----------------------
# Users
# -----------------------

@transactional
def authenticate_user(session: Session, email: str, password: str) -> dict | None:
    """
    Check email/password credentials.

    Returns
    -------
    dict | None
        The user (see `get_user`) when the password matches, otherwise None.
        Unknown email and wrong password are indistinguishable to the caller.
    """
    user = UserDao().fetchUserByEmail(session, email)
    if user is None:
        return None
    if not EncryptionDec().check_passwords(password, user.password):
        return None
    return _user_to_dict(session, user)


@transactional
def get_user(session: Session, user_id: int) -> dict | None:
    """
    Load one user.

    Returns
    -------
    dict | None
        ``{id, name, email, role_id, role, created_at, updated_at}`` or None.
    """
    user = UserDao().fetchUserById(session, user_id)
    return _user_to_dict(session, user) if user else None


@transactional
def get_user_by_email(session: Session, email: str) -> dict | None:
    user = UserDao().fetchUserByEmail(session, email)
    return _user_to_dict(session, user) if user else None


@transactional
def list_users(session: Session) -> list[dict]:
    return [_user_to_dict(session, user) for user in UserDao().fetchUsers(session)]


@transactional
def create_user(session: Session, name: str, email: str, password: str, role_id: int = USER_ROLE_ID) -> dict:
    """
    Create an account.

    Raises
    ------
    DuplicateEmailError
        If the email is already registered (also when a concurrent insert
        takes it first).
    UnknownRoleError
        If ``role_id`` has no row in the role table.
    """
    user_dao = UserDao()
    if user_dao.fetchUserByEmail(session, email) is not None:
        raise DuplicateEmailError("Email já cadastrado")
    _check_role_exists(session, role_id)
    try:
        user = user_dao.createUser(session, User(email=email, password=password, name=name, role_id=role_id))
    except IntegrityError as e:
        # concurrent insert won the unique email constraint
        raise DuplicateEmailError("Email já cadastrado") from e
    return _user_to_dict(session, user)


@transactional
def update_user(
    session: Session,
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
    role_id: int | None = None,
) -> dict | None:
    """
    Edit an account. Fields left as None are not touched.

    Returns None when the user does not exist.
    """
    user_dao = UserDao()
    user = user_dao.fetchUserById(session, user_id)
    if user is None:
        return None
    if email is not None and email != user.email:
        other = user_dao.fetchUserByEmail(session, email)
        if other is not None and other.id != user.id:
            raise DuplicateEmailError("Email já cadastrado")
    if role_id is not None:
        _check_role_exists(session, role_id)
    try:
        user_dao.updateUser(session, user, name=name, email=email, password=password, role_id=role_id)
    except IntegrityError as e:
        raise DuplicateEmailError("Email já cadastrado") from e
    return _user_to_dict(session, user)


@transactional
def delete_user(session: Session, user_id: int) -> bool:
    """
    Delete a user together with its conversations and their messages.

    The three deletes (messages, conversations, user) share one transaction:
    if any step fails nothing is removed.

    Returns
    -------
    bool
        False when the user does not exist.
    """
    user_dao = UserDao()
    conversation_dao = ConversationDao()
    if user_dao.fetchUserById(session, user_id) is None:
        return False
    conversation_ids = conversation_dao.fetchConversationIdsByUserId(session, user_id)
    deleted_messages = MessagesDao().deleteMessagesByConversationIds(session, conversation_ids)
    deleted_conversations = conversation_dao.deleteConversationsByUserId(session, user_id)
    user_dao.deleteUser(session, user_id)
    logger.info(
        "Deleted user %s with %s conversations and %s messages",
        user_id,
        deleted_conversations,
        deleted_messages,
    )
    return True


# -----------------------
# Conversations & messages
# -----------------------

@transactional
def create_conversation(session: Session, user_id: int, title: str, query_type: str = QUERY_TYPE_INTERNET) -> dict:
    """
    Create a new conversation for a given user.

    Returns
    -------
    dict
        ``{id, user_id, title, query_type, created_at, updated_at}``
    """
    conversation = ConversationDao().createConversation(
        session,
        Conversation(
            user_id=user_id,
            title=title,
            query_type=query_type,
            last_updated=datetime.now(timezone.utc),
        ),
    )
    return _conversation_to_dict(conversation)


@transactional
def get_owned_conversation(session: Session, conversation_id: int, user_id: int) -> dict | None:
    """Return the conversation if it exists and belongs to ``user_id``, else None."""
    conversation = ConversationDao().fetchConversationByIdAndUserId(session, conversation_id, user_id)
    return _conversation_to_dict(conversation) if conversation else None


@transactional
def get_user_conversations(session: Session, user_id: int) -> list[dict]:
    """List all conversations of a user, most recently updated first."""
    return [
        _conversation_to_dict(conversation)
        for conversation in ConversationDao().fetchConversationByUserId(session, user_id)
    ]


@transactional
def get_conversation_with_messages(session: Session, conversation_id: int, user_id: int) -> dict | None:
    """
    Load a conversation and its messages in chronological order.

    Returns None when the conversation does not exist or belongs to another
    user, so callers cannot tell the two cases apart.
    """
    conversation = ConversationDao().fetchConversationByIdAndUserId(session, conversation_id, user_id)
    if conversation is None:
        return None
    result = _conversation_to_dict(conversation)
    result["messages"] = [
        _message_to_dict(message)
        for message in MessagesDao().fetchMessagesByConversationId(session, conversation_id)
    ]
    return result


@transactional
def create_message(session: Session, conversation_id: int, role: str, content: str) -> dict:
    """
    Append a message to a conversation and bump the conversation's `updated_at`.

    Returns
    -------
    dict
        ``{id, conversation_id, role, content, created_at}``
    """
    timestamp = datetime.now(timezone.utc)
    message = MessagesDao().createMessage(
        session,
        Message(conversation_id=conversation_id, role=role, content=content, date_created_on=timestamp),
    )
    ConversationDao().updateConversationByDate(session, conversation_id=conversation_id, timestamp=timestamp)
    return _message_to_dict(message)


# -----------------------
# Reports
# -----------------------

@transactional
def get_stats(session: Session) -> dict:
    """
    Global usage counters for the admin dashboard.

    Returns
    -------
    dict
        ``{total_users, total_conversations, total_messages,
        most_active_users: [{user_id, name, email, count}]}``
    """
    user_dao = UserDao()
    return {
        "total_users": user_dao.countUsers(session),
        "total_conversations": ConversationDao().countConversations(session),
        "total_messages": MessagesDao().countMessages(session),
        "most_active_users": [
            {"user_id": row.id, "name": row.name, "email": row.email, "count": row.count}
            for row in user_dao.fetchMostActiveUsers(session, limit=MOST_ACTIVE_USERS_LIMIT)
        ],
    }


@transactional
def get_user_stats(session: Session) -> list[dict]:
    """Per-user conversation and message counts with the last activity timestamp."""
    return [
        {
            "user_id": row.id,
            "name": row.name,
            "email": row.email,
            "role": _role_name(session, row.role_id),
            "conversations": row.conversations,
            "messages": row.messages,
            "last_activity": row.last_activity,
        }
        for row in UserDao().fetchUserActivity(session)
    ]
