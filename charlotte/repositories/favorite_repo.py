# charlotte/repositories/favorite_repo.py
import uuid

from charlotte.core.gateway import Gateway, Query
from charlotte.models.favorite import Favorite
from charlotte.models.pattern import Pattern

TABLE = "favoritos"


class FavoriteRepository:
    """
    Data access layer for the favoritos join table.
    """

    @staticmethod
    def _key(user_id: uuid.UUID, pattern_id: uuid.UUID) -> dict[str, str]:
        return {"usuario_id": str(user_id), "estampa_id": str(pattern_id)}

    def exists(self, gateway: Gateway, user_id: uuid.UUID, pattern_id: uuid.UUID) -> bool:
        return gateway.select_one(TABLE, self._key(user_id, pattern_id)) is not None

    def add(self, gateway: Gateway, user_id: uuid.UUID, pattern_id: uuid.UUID) -> Favorite:
        return Favorite.model_validate(gateway.insert(TABLE, self._key(user_id, pattern_id)))

    def remove(self, gateway: Gateway, user_id: uuid.UUID, pattern_id: uuid.UUID) -> int:
        """Number of join rows removed."""
        return len(gateway.delete(TABLE, self._key(user_id, pattern_id)))

    def list_patterns(self, gateway: Gateway, user_id: uuid.UUID) -> list[Pattern]:
        """
        Patterns favorited by the user.

        Joins whose pattern no longer exists come back with estampa=None
        and are dropped.
        """
        rows = gateway.select(
            Query(
                table=TABLE,
                columns="estampa:estampas(*)",
                match={"usuario_id": str(user_id)},
                order_by=None,
            )
        )
        return [Pattern.model_validate(r["estampa"]) for r in rows if r.get("estampa")]
