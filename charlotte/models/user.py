# charlotte/models/user.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel, Field

# Application roles as stored in usuarios_ext.role
Role = Literal["admin", "cliente"]


class User(SQLModel):
    """
    User profile mirrored in the ``usuarios_ext`` table.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - "admin" | "cliente"
      - gates every administrative operation

    Passwords and sessions live in Supabase Auth; this row only carries the
    display data and the application role. Never deleted by the application.
    """

    id: uuid.UUID = Field(description="Matches Supabase auth.users.id")

    nome_completo: str = Field(description="Display name")

    avatar_url: str | None = Field(
        default=None,
        description="Public URL of the avatar in Storage",
    )

    role: Role = Field(default="cliente")

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserSummary(SQLModel):
    """Author/customer fields expanded through joins."""

    nome_completo: str | None = None
    avatar_url: str | None = None


def initials(nome_completo: str | None) -> str:
    """
    Two-letter initials used as avatar fallback.

    "Ana Maria Souza" -> "AM"
    """
    parts = (nome_completo or "").split()
    return "".join(part[0] for part in parts).upper()[:2]
