# charlotte/services/favorite_service.py
import logging
import uuid

from charlotte.core.gateway import Gateway, SilentWriteError
from charlotte.models.pattern import Pattern
from charlotte.repositories.favorite_repo import FavoriteRepository

logger = logging.getLogger(__name__)


class FavoriteService:
    """
    Favorites as a set of (user, pattern) pairs.

    Toggling is check-then-write with no debouncing: two toggles racing
    each other both act on the state they observed, and whichever write
    completes last decides the outcome.
    """

    def __init__(self, repo: FavoriteRepository):
        self.repo = repo

    def is_favorite(self, gateway: Gateway, user_id: uuid.UUID, pattern_id: uuid.UUID) -> bool:
        return self.repo.exists(gateway, user_id, pattern_id)

    def toggle(self, gateway: Gateway, user_id: uuid.UUID, pattern_id: uuid.UUID) -> bool:
        """
        Delete the join row if present, insert it if absent.

        Returns:
            The new state (True = favorited).
        """
        if self.repo.exists(gateway, user_id, pattern_id):
            if not self.repo.remove(gateway, user_id, pattern_id):
                raise SilentWriteError("Favorite was not removed", table="favoritos")
            logger.info("User %s unfavorited %s", user_id, pattern_id)
            return False

        self.repo.add(gateway, user_id, pattern_id)
        logger.info("User %s favorited %s", user_id, pattern_id)
        return True

    def list_favorites(self, gateway: Gateway, user_id: uuid.UUID) -> list[Pattern]:
        return self.repo.list_patterns(gateway, user_id)
