# charlotte/models/favorite.py
import uuid

from sqlmodel import SQLModel


class Favorite(SQLModel):
    """
    Join row of ``favoritos``: the user favorited the pattern.

    Existence means "favorited", absence means not.
    """

    usuario_id: uuid.UUID
    estampa_id: uuid.UUID
