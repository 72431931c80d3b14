# charlotte/models/comment.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from charlotte.models.user import UserSummary


class Comment(SQLModel):
    """
    Free-text comment on a pattern (``comentarios``).
    Immutable once created.
    """

    id: int
    estampa_id: uuid.UUID
    usuario_id: uuid.UUID
    texto: str
    created_at: datetime

    # Expanded join: author name + avatar
    usuario: UserSummary | None = None
