# charlotte/schemas/comment.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from charlotte.models.user import UserSummary


class CommentCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    texto: str = Field(max_length=2000)

    @field_validator("texto")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("comment cannot be empty")
        return v


class CommentRead(SQLModel):
    id: int
    estampa_id: uuid.UUID
    usuario_id: uuid.UUID
    texto: str
    created_at: datetime
    usuario: UserSummary | None = None
