"""Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from xtermux.catalog.guides import GuideStep
from xtermux.catalog.scripts import Script

Role = Literal["user", "admin", "blocked"]
MessageRole = Literal["user", "assistant", "model", "system"]


# ---------------------------------------------------------------------------
# Auth and profiles
# ---------------------------------------------------------------------------

class UserData(BaseModel):
    username: str = Field(min_length=3, max_length=32)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)


class UserCredentials(BaseModel):
    email: EmailStr
    password: str


class Profile(BaseModel):
    id: str
    username: str
    email: str
    avatar_url: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Profile


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=32)
    avatar_url: Optional[str] = None

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        """Surrounding blanks do not count towards the length bounds."""
        if isinstance(value, str):
            return value.strip()
        return value


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class NewUser(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    username: Optional[str] = Field(default=None, min_length=3, max_length=32)
    role: Role = "user"


class RoleUpdate(BaseModel):
    role: Role


class BlockUpdate(BaseModel):
    blocked: bool


# ---------------------------------------------------------------------------
# Chat sessions and messages
# ---------------------------------------------------------------------------

class SessionCreationDetails(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)


class UpdateSessionDetails(BaseModel):
    title: str = Field(min_length=1, max_length=255)


class NewMessage(BaseModel):
    session_id: int
    role: MessageRole
    content: str
    image: Optional[str] = None


class Message(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    role: str
    content: str
    image: Optional[str] = None
    created_at: datetime


class SessionWithMessages(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    created_at: datetime
    messages: List[Message] = []


# ---------------------------------------------------------------------------
# AI proxy
# ---------------------------------------------------------------------------

class CompletionMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str
    content: Any


class CompletionRequest(BaseModel):
    messages: List[CompletionMessage] = Field(min_length=1)
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    stream: bool = False


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    session_id: Optional[int] = None
    model: Optional[str] = None


class ChatReply(BaseModel):
    session_id: int
    message: Message


class ArchitectRequest(BaseModel):
    prompt: str = Field(min_length=1)
    model: Optional[str] = None


class ArchitectBlueprint(BaseModel):
    scriptName: str = ""
    description: str = ""
    language: str = ""
    dependencies: List[str] = []
    code: str = ""
    instructions: str = ""


class AIModel(BaseModel):
    id: str
    name: str
    provider: str
    description: str


# ---------------------------------------------------------------------------
# Catalog and guides
# ---------------------------------------------------------------------------

class ScriptItem(Script):
    risk_level: str


class ScriptPage(BaseModel):
    items: List[ScriptItem]
    total: int
    has_more: bool


class GuideView(BaseModel):
    id: str
    title: str
    description: str
    steps: List[GuideStep]
    progress: int
    completed: bool


class StepToggle(BaseModel):
    key: str
    completed: bool
    progress: int


class ResetSelection(BaseModel):
    guide_ids: List[str]


class ResetResult(BaseModel):
    reset: int
    message: str


ProgressMap = Dict[str, bool]


class HealthResponse(BaseModel):
    status: str
    database: bool
    ai_configured: bool
