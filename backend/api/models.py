"""
Pydantic models used for request/response validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. Requests are validated
here before any side effect happens.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

QueryType = Literal["internet", "laws"]


class UserCredentials(BaseModel):
    """
    Represents login credentials for a user.
    """
    email: EmailStr
    """The email used as login."""
    password: str = Field(..., min_length=1)
    """The plaintext password provided for authentication."""


class UserPublic(BaseModel):
    """Non-sensitive user data returned to the client."""
    id: int
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    token: str
    """Signed bearer token, valid for 24 hours."""
    user: UserPublic


class CurrentUser(UserPublic):
    """
    The authenticated caller, resolved once per request by the auth gate.
    """
    is_admin: bool = False
    """True when the caller holds the admin role."""


class StatusMessage(BaseModel):
    message: str


class ChatQuery(BaseModel):
    """
    A question sent from the chat window.
    """
    question: str = Field(..., min_length=1, description="The user's question.")
    conversationId: Optional[int] = Field(
        None, description="Existing conversation to append to; omitted to start a new one."
    )
    queryType: QueryType = Field("internet", description="`internet` (general model) or `laws` (internal laws base).")


class ChatAnswer(BaseModel):
    answer: str
    conversation_id: int
    query_type: QueryType


class ConversationSummary(BaseModel):
    """One entry of the history sidebar."""
    id: int
    title: str
    date: datetime
    """Last time a message was appended."""
    query_type: QueryType


class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime


class ConversationDetail(BaseModel):
    id: int
    title: str
    query_type: QueryType
    messages: List[HistoryMessage]


# -----------------------
# Admin
# -----------------------

class UserCreate(BaseModel):
    """
    Represents data required to create a new account from the admin panel.
    """
    name: str = Field(..., min_length=2, description="Nome deve ter pelo menos 2 caracteres")
    email: EmailStr
    password: str = Field(..., min_length=6, description="Senha deve ter pelo menos 6 caracteres")
    role_id: int = Field(2, gt=0, description="Identifier of the role (1 admin, 2 user).")


class UserUpdate(BaseModel):
    """
    Partial update of an account. Omitted fields are left untouched.
    """
    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role_id: Optional[int] = Field(None, gt=0)


class AdminUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role_id: int
    role: str
    created_at: datetime
    updated_at: datetime


class RoleOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None


class MostActiveUser(BaseModel):
    user_id: int
    name: str
    email: str
    count: int


class StatsResponse(BaseModel):
    total_users: int
    total_conversations: int
    total_messages: int
    most_active_users: List[MostActiveUser]


class UserStats(BaseModel):
    user_id: int
    name: str
    email: str
    role: str
    conversations: int
    messages: int
    last_activity: Optional[datetime] = None


class EnvSettingsUpdate(BaseModel):
    """Key/value pairs to write to the environment file."""
    settings: Dict[str, str]


class EnvSettingsResponse(BaseModel):
    settings: Dict[str, str]
    """Editable keys with secret values masked."""
    version: int


class EnvSettingsSaved(BaseModel):
    message: str
    version: int
    restart_required: bool = True
