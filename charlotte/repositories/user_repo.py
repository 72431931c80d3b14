# charlotte/repositories/user_repo.py
import uuid
from typing import Any

from charlotte.core.gateway import Gateway
from charlotte.models.user import User

TABLE = "usuarios_ext"


class UserRepository:
    """
    Data access layer for user profiles.

    Responsibilities:
      - Pure gateway operations (reads + writes on usuarios_ext)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, gateway: Gateway, user_id: uuid.UUID) -> User | None:
        """Return a profile by id, or None if not found."""
        row = gateway.select_one(TABLE, {"id": str(user_id)})
        return User.model_validate(row) if row else None

    def create(self, gateway: Gateway, user: User) -> User:
        """Insert a new profile and return the persisted row."""
        row = gateway.insert(
            TABLE,
            user.model_dump(mode="json", include={"id", "nome_completo", "avatar_url", "role"}),
        )
        return User.model_validate(row)

    def update(self, gateway: Gateway, user_id: uuid.UUID, values: dict[str, Any]) -> User:
        """Persist changes to an existing profile."""
        row = gateway.update(TABLE, values, {"id": str(user_id)})
        return User.model_validate(row)
