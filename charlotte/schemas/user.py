# charlotte/schemas/user.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from charlotte.models.user import Role, User, initials


class UserRead(SQLModel):
    """Response schema returned to clients."""

    id: uuid.UUID
    nome_completo: str
    avatar_url: str | None
    role: Role
    created_at: datetime | None
    updated_at: datetime | None
    iniciais: str

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(**user.model_dump(), iniciais=initials(user.nome_completo))


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Only editable field is `nome_completo`; role changes happen in the backend.
    """

    model_config = ConfigDict(extra="forbid")

    nome_completo: str | None = Field(default=None, max_length=200)

    @field_validator("nome_completo")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
